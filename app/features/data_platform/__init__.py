"""Record store: ORM models, field catalog, record schemas and repository."""

from app.features.data_platform.fields import (
    ENTITY_SCHEMAS,
    CustomerField,
    Entity,
    EntitySchema,
    InventoryField,
    Record,
    SalesField,
    SortDirection,
    UserField,
    field_key,
    get_entity_schema,
)
from app.features.data_platform.repository import RecordRepository

__all__ = [
    "ENTITY_SCHEMAS",
    "CustomerField",
    "Entity",
    "EntitySchema",
    "InventoryField",
    "Record",
    "RecordRepository",
    "SalesField",
    "SortDirection",
    "UserField",
    "field_key",
    "get_entity_schema",
]
