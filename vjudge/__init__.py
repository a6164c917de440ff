"""Online judge front end: problem browsing, code submission and verdict tracking."""

__version__ = "0.1.0"