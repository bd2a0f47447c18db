"""
Integration tests.

Exercise the consumption loop against the Redis-backed store. They use the
in-memory Redis stub unless USE_REAL_REDIS is set.
"""
