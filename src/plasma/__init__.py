"""
Plasma - package composition builder

Plasma assembles independently downloaded, versioned packages into one
layered image tree that downstream prepare stages consume.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
