from .validator import SchemaRegistry, get_schema_registry

__all__ = ["SchemaRegistry", "get_schema_registry"]
