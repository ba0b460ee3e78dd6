"""Utility helpers (logging, pretty printing)."""
