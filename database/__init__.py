"""
SQLAlchemy models and unit-of-work access to the transcript database
"""
