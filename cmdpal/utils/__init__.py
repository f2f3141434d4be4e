"""Shared utilities for cmdpal."""
