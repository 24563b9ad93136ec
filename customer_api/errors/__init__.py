"""Shared error handling package.

Centralizes error-to-HTTP mapping so that every failure raised while
processing a request is answered from one classification table.
"""
