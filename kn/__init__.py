"""
kn: parse loosely structured plain-text note files into structured documents.
"""

__version__ = "1.0"
