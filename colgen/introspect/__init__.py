from .fields import collect_fields, entity_fields, imported_fields
from .resolver import GoSourceResolver, MappingResolver, TypeResolver, relative_qualifier

__all__ = [
    "collect_fields",
    "entity_fields",
    "imported_fields",
    "GoSourceResolver",
    "MappingResolver",
    "TypeResolver",
    "relative_qualifier",
]
