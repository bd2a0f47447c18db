"""
Infrastructure Module

Adapters to external systems: Redis connection, queue stores, schema registry
and Prometheus metrics.
"""
