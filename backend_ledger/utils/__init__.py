"""
Shared helpers: epoch-millisecond time arithmetic and wallet formatting.
"""
