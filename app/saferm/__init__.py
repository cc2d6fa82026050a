"""saferm - a safer alternative to rm.

Moves files into a recycle bin directory and permanently deletes them
once they have outlived a configurable retention window.
"""

__version__ = "0.1.0"
