"""Core models and error taxonomy."""
