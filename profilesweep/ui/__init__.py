"""User interface helpers."""
