"""
Test configuration package initialization.

Holds pytest marker registration shared by the suite.
"""
