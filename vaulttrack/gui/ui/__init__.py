"""Widget styling helpers."""
