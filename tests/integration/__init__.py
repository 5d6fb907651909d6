"""Integration tests for the request logging middleware."""
