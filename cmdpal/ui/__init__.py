"""Textual user interface for the cmdpal command palette."""
