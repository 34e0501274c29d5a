from dataclasses import dataclass, asdict
from typing import Any, Dict, Mapping, Optional


MANY_TO_ONE = "M2O"
ONE_TO_MANY = "O2M"
MANY_TO_MANY = "M2M"


@dataclass
class RelationshipDescriptor:
    """
    Relation between a field and another collection.

    The type is always read relative to the field that owns the descriptor:
    the same raw relation is M2O on the "many" side and O2M (or M2M when a
    junction field exists) on the "one" side.
    """
    collection_many: Optional[str] = None
    field_many: Optional[str] = None
    collection_one: Optional[str] = None
    field_one: Optional[str] = None
    junction_field: Optional[str] = None

    id: Optional[int] = None
    type: Optional[str] = None

    @classmethod
    def from_attributes(
        cls,
        attributes: Mapping[str, Any],
        collection_name: Optional[str] = None,
        field_name: Optional[str] = None,
    ) -> "RelationshipDescriptor":
        relationship = cls(
            collection_many=attributes.get("collection_many"),
            field_many=attributes.get("field_many"),
            collection_one=attributes.get("collection_one"),
            field_one=attributes.get("field_one"),
            junction_field=attributes.get("junction_field"),
            id=attributes.get("id"),
        )
        relationship.type = relationship.guess_type(collection_name, field_name)
        return relationship

    def guess_type(
        self,
        collection_name: Optional[str],
        field_name: Optional[str],
    ) -> Optional[str]:
        if collection_name is None or field_name is None:
            return None

        if (collection_name, field_name) == (self.collection_many, self.field_many):
            return MANY_TO_ONE

        if (collection_name, field_name) == (self.collection_one, self.field_one):
            if self.junction_field:
                return MANY_TO_MANY
            return ONE_TO_MANY

        return None

    def get_type(self) -> Optional[str]:
        return self.type

    def is_many_to_one(self) -> bool:
        return self.type == MANY_TO_ONE

    def is_one_to_many(self) -> bool:
        return self.type == ONE_TO_MANY

    def is_many_to_many(self) -> bool:
        return self.type == MANY_TO_MANY

    def serialize(self) -> Dict[str, Any]:
        return asdict(self)
