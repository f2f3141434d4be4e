"""CLI command groups for cmdpal."""
