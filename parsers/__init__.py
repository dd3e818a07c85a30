"""
XML decoding and text parsing for transcript documents
"""
