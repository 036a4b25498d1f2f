"""
Fallback version module read by hatchling during builds.

Bump this on release; editable checkouts import it as-is.
"""

__version__ = "0.1.0"
