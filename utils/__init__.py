"""
utils/ - Shared Helpers
=======================
Logging setup and the exception hierarchy.
"""
