"""
services/ - Business Logic Layer
================================
Quote retrieval, selection, delivery, the command state machine
and the daily broadcast.
"""
