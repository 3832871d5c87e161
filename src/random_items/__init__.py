"""random-items — periodic random item draws from a filtered repository catalog."""

__version__ = "0.1.0"
