"""Typed field catalog for every record entity.

Records are flat mappings keyed by camelCase wire names. Each entity exposes
its keys as a ``str`` enum, and an ``EntitySchema`` describes how those keys
behave in search, filters, sorting and CSV export. Callers resolve
user-supplied field names through the schema instead of indexing records
with arbitrary strings.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

Record = Mapping[str, Any]


class Entity(str, Enum):
    """Record collections served by the API."""

    USERS = "users"
    SALES = "sales"
    CUSTOMERS = "customers"
    INVENTORY = "inventory"


class SortDirection(str, Enum):
    """Sort order for table columns."""

    ASC = "asc"
    DESC = "desc"


class UserField(str, Enum):
    ID = "id"
    EMAIL = "email"
    FIRST_NAME = "firstName"
    LAST_NAME = "lastName"
    PHONE = "phone"
    ADDRESS = "address"
    ROLE = "role"
    PERMISSIONS = "permissions"
    AVATAR = "avatar"
    IS_ACTIVE = "isActive"
    STATUS = "status"
    LAST_LOGIN = "lastLogin"
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"


class SalesField(str, Enum):
    ID = "id"
    DATE = "date"
    REVENUE = "revenue"
    ORDERS = "orders"
    CUSTOMERS = "customers"
    CHANNEL = "channel"


class CustomerField(str, Enum):
    ID = "id"
    DATE = "date"
    TOTAL_CUSTOMERS = "totalCustomers"
    NEW_CUSTOMERS = "newCustomers"
    RETURNING_CUSTOMERS = "returningCustomers"
    AVERAGE_ORDER_VALUE = "averageOrderValue"


class InventoryField(str, Enum):
    ID = "id"
    SKU = "sku"
    NAME = "name"
    CATEGORY = "category"
    STOCK = "stock"
    RESERVED = "reserved"
    PRICE = "price"
    COST = "cost"
    SUPPLIER = "supplier"
    REORDER_LEVEL = "reorderLevel"
    LAST_UPDATED = "lastUpdated"


def field_key(field: str | Enum) -> str:
    """Return the record key for a field enum member or raw key."""
    if isinstance(field, Enum):
        return str(field.value)
    return field


def _keys(fields: Iterable[Enum]) -> tuple[str, ...]:
    return tuple(field_key(f) for f in fields)


@dataclass(frozen=True)
class EntitySchema:
    """How an entity's fields participate in tables and exports.

    Attributes:
        entity: Entity described.
        fields: Enum of every known field key.
        searchable: Keys matched by free-text search (OR across keys).
        filterable: Keys accepted as exact-match predicates.
        date_fields: Keys rendered as date-times in exports.
        multi_value_fields: Keys holding lists, joined with ``"; "`` in exports.
        never_when_empty: Date keys rendered ``Never`` when null.
        default_export: Export column order when the caller selects none.
        default_sort: Sort key applied when the caller gives none.
        default_direction: Direction paired with ``default_sort``.
    """

    entity: Entity
    fields: type[Enum]
    searchable: tuple[str, ...]
    filterable: tuple[str, ...]
    date_fields: frozenset[str]
    multi_value_fields: frozenset[str]
    never_when_empty: frozenset[str]
    default_export: tuple[str, ...]
    default_sort: str
    default_direction: SortDirection

    @property
    def keys(self) -> tuple[str, ...]:
        """All field keys in declaration order."""
        return _keys(self.fields)

    def has_field(self, key: str) -> bool:
        """Check whether ``key`` names a field of this entity."""
        return key in self.keys

    def unknown_fields(self, keys: Iterable[str]) -> list[str]:
        """Return the keys that are not fields of this entity, in order."""
        return [key for key in keys if not self.has_field(key)]


ENTITY_SCHEMAS: dict[Entity, EntitySchema] = {
    Entity.USERS: EntitySchema(
        entity=Entity.USERS,
        fields=UserField,
        searchable=_keys([UserField.FIRST_NAME, UserField.LAST_NAME, UserField.EMAIL]),
        filterable=_keys([UserField.ROLE, UserField.STATUS, UserField.IS_ACTIVE]),
        date_fields=frozenset(
            _keys([UserField.CREATED_AT, UserField.UPDATED_AT, UserField.LAST_LOGIN])
        ),
        multi_value_fields=frozenset(_keys([UserField.PERMISSIONS])),
        never_when_empty=frozenset(_keys([UserField.LAST_LOGIN])),
        default_export=_keys(
            [
                UserField.ID,
                UserField.FIRST_NAME,
                UserField.LAST_NAME,
                UserField.EMAIL,
                UserField.PHONE,
                UserField.ADDRESS,
                UserField.ROLE,
                UserField.STATUS,
                UserField.IS_ACTIVE,
                UserField.CREATED_AT,
                UserField.LAST_LOGIN,
            ]
        ),
        default_sort=UserField.CREATED_AT.value,
        default_direction=SortDirection.DESC,
    ),
    Entity.SALES: EntitySchema(
        entity=Entity.SALES,
        fields=SalesField,
        searchable=_keys([SalesField.CHANNEL]),
        filterable=_keys([SalesField.CHANNEL]),
        date_fields=frozenset(),
        multi_value_fields=frozenset(),
        never_when_empty=frozenset(),
        default_export=_keys(SalesField),
        default_sort=SalesField.DATE.value,
        default_direction=SortDirection.ASC,
    ),
    Entity.CUSTOMERS: EntitySchema(
        entity=Entity.CUSTOMERS,
        fields=CustomerField,
        searchable=(),
        filterable=(),
        date_fields=frozenset(),
        multi_value_fields=frozenset(),
        never_when_empty=frozenset(),
        default_export=_keys(CustomerField),
        default_sort=CustomerField.DATE.value,
        default_direction=SortDirection.DESC,
    ),
    Entity.INVENTORY: EntitySchema(
        entity=Entity.INVENTORY,
        fields=InventoryField,
        searchable=_keys([InventoryField.SKU, InventoryField.NAME, InventoryField.CATEGORY]),
        filterable=_keys([InventoryField.CATEGORY, InventoryField.SUPPLIER]),
        date_fields=frozenset(_keys([InventoryField.LAST_UPDATED])),
        multi_value_fields=frozenset(),
        never_when_empty=frozenset(),
        default_export=_keys(InventoryField),
        default_sort=InventoryField.LAST_UPDATED.value,
        default_direction=SortDirection.DESC,
    ),
}


def get_entity_schema(entity: Entity) -> EntitySchema:
    """Look up the field schema for an entity."""
    return ENTITY_SCHEMAS[entity]
