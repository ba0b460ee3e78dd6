"""Input/output collaborators: puzzle files, bitmap rendering, ASCII art."""
