"""Core configuration, errors and logging for ABC Retailers."""
