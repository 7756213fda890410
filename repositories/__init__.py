"""
repositories/ - Data Access Layer
==================================
Each repository wraps one key-value namespace and converts stored
JSON into domain model objects.
"""
