"""Local Finance Manager - accounts service with optimistic concurrency."""

__version__ = "0.1.0"
