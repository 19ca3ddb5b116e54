"""
utils/ - Shared Helpers
=======================
Logging setup and the error taxonomy used by every layer.
"""
