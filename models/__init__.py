"""
models/ - Domain Models
=======================
Plain dataclasses describing singers and the payloads used to query them.
No database or logging dependencies.
"""
