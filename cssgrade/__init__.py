"""cssgrade - presence-based autograder for CSS lab submissions."""

__version__ = "0.2.0"
