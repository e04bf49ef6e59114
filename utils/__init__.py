"""Helpers for error responses and presentation."""
