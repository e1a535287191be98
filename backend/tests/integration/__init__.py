"""
Integration tests package.

Contains tests that drive the Flask application end to end against the
in-memory database.
"""
