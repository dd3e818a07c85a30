"""
Configuration for the hearing transcript loader
"""
