"""Domain model for ABC Retailers."""
