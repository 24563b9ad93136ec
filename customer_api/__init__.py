"""Customer CRUD API with centralized HTTP error classification."""

__version__ = "0.1.0"
