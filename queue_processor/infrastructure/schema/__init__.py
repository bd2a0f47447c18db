from .registry import SchemaRegistry

__all__ = ["SchemaRegistry"]
