"""
Unit tests package.

Contains isolated tests for the domain model, DTO validation, services
(against mocked repositories) and repositories (against in-memory SQLite).
"""
