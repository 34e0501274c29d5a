import logging
import re
from dataclasses import dataclass, field, fields as dataclass_fields
from typing import Any, Dict, Mapping, Optional, Union

from schemakit.canonical.relationship import RelationshipDescriptor
from schemakit.observability.logger import log_event
from schemakit.standards.data_types import (
    DataTypeCatalog,
    TYPE_DATETIME_CREATED,
    TYPE_DATETIME_MODIFIED,
    TYPE_SORT,
    TYPE_STATUS,
    TYPE_USER_CREATED,
    TYPE_USER_MODIFIED,
)

_LEADING_INT = re.compile(r"^\s*[+-]?\d+")

# Raw introspection key -> FieldDescriptor attribute
_ATTRIBUTE_KEYS = {
    "id": "id",
    "collection": "collection_name",
    "field": "name",
    "type": "logical_type",
    "datatype": "data_type",
    "column_type": "column_type",
    "length": "length",
    "char_length": "char_length",
    "precision": "precision",
    "scale": "scale",
    "signed": "signed",
    "nullable": "nullable",
    "key": "key",
    "extra": "extra",
    "auto_increment": "auto_increment",
    "primary_key": "primary_key",
    "unique": "unique_key",
    "required": "required",
    "sort": "sort",
    "interface": "interface",
    "options": "options",
    "hidden_list": "hidden_in_list",
    "hidden_input": "hidden_in_form",
    "comment": "note",
    "validation": "validation_pattern",
    "managed": "managed",
    "default_value": "default_value",
}

_INT_ATTRIBUTES = {"length", "char_length", "precision", "scale", "sort"}
_BOOL_ATTRIBUTES = {
    "signed",
    "nullable",
    "auto_increment",
    "primary_key",
    "unique_key",
    "required",
    "hidden_in_list",
    "hidden_in_form",
}


def _to_int(value: Any) -> int:
    """
    Loose integer coercion: None and unparseable values become 0,
    strings keep their leading integer ("12abc" -> 12).
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return int(value)

    match = _LEADING_INT.match(str(value))
    return int(match.group(0)) if match else 0


def _to_bool(value: Any) -> bool:
    """
    Introspection flags often arrive as strings: "0" and "" are false.
    """
    if isinstance(value, str):
        return value.strip() not in ("", "0")
    return bool(value)


def _equals_one(value: Any) -> bool:
    if isinstance(value, str):
        try:
            return float(value.strip()) == 1
        except ValueError:
            return False
    return value == 1


@dataclass
class FieldDescriptor:
    """
    Metadata of a single collection field.

    All defaults live here: absent flags are False, absent sizes are 0,
    absent strings are None. A primary key field never carries a relationship.
    """
    name: Optional[str] = None
    collection_name: Optional[str] = None
    id: Optional[int] = None

    logical_type: Optional[str] = None
    data_type: Optional[str] = None
    column_type: Optional[str] = None

    length: int = 0
    char_length: int = 0
    precision: int = 0
    scale: int = 0

    signed: bool = False
    nullable: bool = False
    key: Optional[str] = None
    extra: Optional[str] = None
    auto_increment: bool = False
    primary_key: bool = False
    unique_key: bool = False
    required: bool = False
    sort: int = 0

    interface: Optional[str] = None
    options: Dict[str, Any] = field(default_factory=dict)
    hidden_in_list: bool = False
    hidden_in_form: bool = False
    note: Optional[str] = None
    validation_pattern: Optional[str] = None
    managed: bool = False

    default_value: Any = None

    # Introspection keys with no typed counterpart, kept for serialization
    extra_attributes: Dict[str, Any] = field(default_factory=dict)

    relationship: Optional[RelationshipDescriptor] = field(default=None, repr=False)

    @classmethod
    def from_attributes(cls, attributes: Mapping[str, Any]) -> "FieldDescriptor":
        values: Dict[str, Any] = {}
        extra_attributes: Dict[str, Any] = {}

        for raw_key, raw_value in attributes.items():
            if raw_key == "relationship":
                continue

            attr = _ATTRIBUTE_KEYS.get(raw_key)
            if attr is None:
                extra_attributes[raw_key] = raw_value
                continue

            if attr in _INT_ATTRIBUTES:
                values[attr] = _to_int(raw_value)
            elif attr in _BOOL_ATTRIBUTES:
                values[attr] = _to_bool(raw_value)
            elif attr == "managed":
                values[attr] = _equals_one(raw_value)
            elif attr == "id":
                values[attr] = None if raw_value is None else _to_int(raw_value)
            elif attr == "options":
                values[attr] = dict(raw_value) if isinstance(raw_value, Mapping) else {}
            else:
                values[attr] = raw_value

        descriptor = cls(extra_attributes=extra_attributes, **values)

        relationship = attributes.get("relationship")
        if relationship:
            descriptor.set_relationship(relationship)

        return descriptor

    # -------------------------------------------------
    # Accessors
    # -------------------------------------------------
    def get_id(self) -> Optional[int]:
        return self.id

    def get_name(self) -> Optional[str]:
        return self.name

    def get_type(self) -> Optional[str]:
        return self.logical_type

    def get_data_type(self) -> Optional[str]:
        return self.data_type

    def get_column_type(self) -> Optional[str]:
        return self.column_type

    def get_collection_name(self) -> Optional[str]:
        return self.collection_name

    def get_length(self) -> int:
        # char length wins over the declared length
        if self.char_length:
            return self.char_length
        return self.length

    def get_char_length(self) -> int:
        return self.char_length

    def get_precision(self) -> int:
        return self.precision

    def get_scale(self) -> int:
        return self.scale

    def get_sort(self) -> int:
        return self.sort

    def get_key(self) -> Optional[str]:
        return self.key

    def get_extra(self) -> Optional[str]:
        return self.extra

    def get_default_value(self) -> Any:
        return self.default_value

    def get_interface(self) -> Optional[str]:
        return self.interface

    def get_note(self) -> Optional[str]:
        return self.note

    def get_validation(self) -> Optional[str]:
        return self.validation_pattern

    def get_options(self, key: Optional[str] = None) -> Any:
        """
        All options, or the value under `key`.
        Nested options are reached with a dotted path ("size.width").
        """
        if key is None:
            return self.options

        value: Any = self.options
        for part in key.split("."):
            if not isinstance(value, Mapping) or part not in value:
                return None
            value = value[part]
        return value

    # -------------------------------------------------
    # Flags
    # -------------------------------------------------
    def is_signed(self) -> bool:
        return self.signed

    def is_nullable(self) -> bool:
        return self.nullable

    def is_required(self) -> bool:
        return self.required

    def is_hidden_list(self) -> bool:
        return self.hidden_in_list

    def is_hidden_input(self) -> bool:
        return self.hidden_in_form

    def is_managed(self) -> bool:
        return self.managed

    def has_auto_increment(self) -> bool:
        return self.auto_increment

    def has_primary_key(self) -> bool:
        return self.primary_key

    def has_unique_key(self) -> bool:
        return self.unique_key

    def has_zero_fill(self) -> bool:
        return "zerofill" in (self.column_type or "")

    # -------------------------------------------------
    # Type classification
    # -------------------------------------------------
    def is_alias(self) -> bool:
        return DataTypeCatalog.is_alias_type(self.logical_type)

    def is_array(self) -> bool:
        return DataTypeCatalog.is_array_type(self.logical_type)

    def is_json(self) -> bool:
        return DataTypeCatalog.is_json_type(self.logical_type)

    def is_boolean(self) -> bool:
        return DataTypeCatalog.is_boolean_type(self.logical_type)

    def is_system_date_type(self) -> bool:
        return DataTypeCatalog.is_system_date_type(self.logical_type)

    def is_type(self, type_name: str) -> bool:
        return (type_name or "").lower() == (self.logical_type or "").lower()

    def is_status_type(self) -> bool:
        return self.is_type(TYPE_STATUS)

    def is_sorting_type(self) -> bool:
        return self.is_type(TYPE_SORT)

    def is_date_created_type(self) -> bool:
        return self.is_type(TYPE_DATETIME_CREATED)

    def is_user_created_type(self) -> bool:
        return self.is_type(TYPE_USER_CREATED)

    def is_date_modified_type(self) -> bool:
        return self.is_type(TYPE_DATETIME_MODIFIED)

    def is_user_modified_type(self) -> bool:
        return self.is_type(TYPE_USER_MODIFIED)

    # -------------------------------------------------
    # Relationship
    # -------------------------------------------------
    def set_relationship(
        self,
        relationship: Union[RelationshipDescriptor, Mapping[str, Any]],
    ) -> bool:
        """
        Attach a relationship, given as a descriptor or a raw relation mapping.

        Returns False, leaving the field untouched, when the field is a
        primary key.
        """
        if self.has_primary_key():
            log_event("RELATIONSHIP_REJECTED", {
                "collection": self.collection_name,
                "field": self.name,
                "reason": "primary key fields cannot carry a relationship",
            }, level=logging.WARNING)
            return False

        if not isinstance(relationship, RelationshipDescriptor):
            relationship = RelationshipDescriptor.from_attributes(
                relationship,
                collection_name=self.collection_name,
                field_name=self.name,
            )

        self.relationship = relationship
        return True

    def get_relationship(self) -> Optional[RelationshipDescriptor]:
        return self.relationship

    def has_relationship(self) -> bool:
        return self.relationship is not None

    def get_relationship_type(self) -> Optional[str]:
        if not self.has_relationship():
            return None
        return self.relationship.get_type()

    def is_many_to_one(self) -> bool:
        return self.has_relationship() and self.relationship.is_many_to_one()

    def is_many_to_many(self) -> bool:
        return self.has_relationship() and self.relationship.is_many_to_many()

    def is_one_to_many(self) -> bool:
        return self.has_relationship() and self.relationship.is_one_to_many()

    def is_to_many(self) -> bool:
        return self.is_one_to_many() or self.is_many_to_many()

    # -------------------------------------------------
    # Serialization
    # -------------------------------------------------
    def serialize(self) -> Dict[str, Any]:
        """
        Attributes under their introspection keys, plus `relationship`.
        """
        typed = {f.name: getattr(self, f.name) for f in dataclass_fields(self)}

        data: Dict[str, Any] = dict(self.extra_attributes)
        for raw_key, attr in _ATTRIBUTE_KEYS.items():
            value = typed[attr]
            data[raw_key] = dict(value) if attr == "options" else value

        data["relationship"] = (
            self.relationship.serialize() if self.has_relationship() else None
        )
        return data

    to_dict = serialize
