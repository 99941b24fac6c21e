"""Template rendering and output writing."""
