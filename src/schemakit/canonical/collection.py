from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from schemakit.canonical.field import FieldDescriptor


@dataclass
class CollectionSchema:
    """
    Snapshot of one collection's fields, in introspection order.

    Owns its FieldDescriptors; relationships are attached after the
    snapshot is built (see adapters.schema_file_adapter).
    """
    name: str
    fields: List[FieldDescriptor] = field(default_factory=list)

    note: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_attributes(
        cls,
        name: str,
        field_attributes: Iterable[Mapping[str, Any]],
        note: Optional[str] = None,
    ) -> "CollectionSchema":
        fields = []
        for attributes in field_attributes:
            attributes = dict(attributes)
            attributes.setdefault("collection", name)
            fields.append(FieldDescriptor.from_attributes(attributes))

        return cls(name=name, fields=fields, note=note)

    # Convenience helpers
    def get_field(self, name: str) -> Optional[FieldDescriptor]:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def has_field(self, name: str) -> bool:
        return self.get_field(name) is not None

    def get_field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    def get_fields(self, names: Optional[Iterable[str]] = None) -> List[FieldDescriptor]:
        if names is None:
            return list(self.fields)

        wanted = set(names)
        return [f for f in self.fields if f.name in wanted]

    def get_primary_field(self) -> Optional[FieldDescriptor]:
        for f in self.fields:
            if f.has_primary_key():
                return f
        return None

    def get_alias_fields(self) -> List[FieldDescriptor]:
        return [f for f in self.fields if f.is_alias()]

    def get_non_alias_fields(self) -> List[FieldDescriptor]:
        return [f for f in self.fields if not f.is_alias()]

    def get_relational_fields(self) -> List[FieldDescriptor]:
        return [f for f in self.fields if f.has_relationship()]

    def serialize(self) -> Dict[str, Any]:
        return {
            "collection": self.name,
            "note": self.note,
            "fields": [f.serialize() for f in self.fields],
        }
