"""
Transcript import pipeline
"""
