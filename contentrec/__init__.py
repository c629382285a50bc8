"""
Content recommendation and trending engine for the blog platform.
"""

__version__ = "1.0.0"
