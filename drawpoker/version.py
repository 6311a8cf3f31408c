"""
Version information for draw poker.
"""

__version__ = "0.4.0"
