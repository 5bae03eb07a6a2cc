"""Core exceptions and data types."""
