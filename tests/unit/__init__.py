"""Unit tests for reqlog core functionality.

Unit tests should:
- Not start an application
- Test individual functions and classes in isolation
- Be fast to execute
"""
