"""
security/ - Access Control
==========================
Guards for the HTTP maintenance endpoints.
"""
