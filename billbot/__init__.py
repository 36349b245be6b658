"""billbot — LINE webhook bot that files bill photos for categorization."""

__version__ = "0.1.0"
