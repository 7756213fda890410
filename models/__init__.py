"""
models/ - Domain Layer
======================
Plain dataclasses for subscribers, catalog quotes and inbound messages.
"""
