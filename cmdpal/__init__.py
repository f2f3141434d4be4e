"""
cmdpal - Command palette state store
"""

__version__ = "0.3.0"
