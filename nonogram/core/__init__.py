"""Core shared types for the nonogram solver."""
