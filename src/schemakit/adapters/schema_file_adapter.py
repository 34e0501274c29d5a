import json
import os
from typing import Any, Dict, Iterable, List, Mapping, Optional

import yaml

from schemakit.canonical.collection import CollectionSchema
from schemakit.observability.logger import log_event
from schemakit.utils.exceptions import SchemaDefinitionError


def _field_attribute_list(collection_name: str, raw_fields: Any) -> List[Dict[str, Any]]:
    """
    Fields may be given as a list of attribute mappings or as a mapping
    keyed by field name.
    """
    if raw_fields is None:
        return []

    if isinstance(raw_fields, Mapping):
        items = []
        for name, attributes in raw_fields.items():
            if attributes is not None and not isinstance(attributes, Mapping):
                raise SchemaDefinitionError(
                    f"Field '{name}' of collection '{collection_name}' must be a mapping"
                )
            attributes = dict(attributes or {})
            attributes.setdefault("field", name)
            items.append(attributes)
        return items

    if isinstance(raw_fields, list):
        items = []
        for attributes in raw_fields:
            if not isinstance(attributes, Mapping) or not attributes.get("field"):
                raise SchemaDefinitionError(
                    f"Collection '{collection_name}' has a field without a 'field' name"
                )
            items.append(dict(attributes))
        return items

    raise SchemaDefinitionError(
        f"Fields of collection '{collection_name}' must be a list or a mapping"
    )


def attach_relationships(
    collections: Mapping[str, CollectionSchema],
    relations: Iterable[Mapping[str, Any]],
) -> int:
    """
    Attach each raw relation to the fields on both of its sides.

    The "many" side gets the relation as M2O; the "one" side gets it as
    O2M, or M2M when the relation has a junction field. Returns how many
    fields accepted a relationship.
    """
    attached = 0

    for relation in relations:
        sides = (
            (relation.get("collection_many"), relation.get("field_many")),
            (relation.get("collection_one"), relation.get("field_one")),
        )
        for collection_name, field_name in sides:
            if not collection_name or not field_name:
                continue

            collection = collections.get(collection_name)
            field = collection.get_field(field_name) if collection else None
            if field is None:
                continue

            if field.set_relationship(relation):
                attached += 1

    return attached


def build_collections(definition: Mapping[str, Any]) -> Dict[str, CollectionSchema]:
    """
    Build collection snapshots from a parsed schema definition:

        collections:
          articles:
            note: ...
            fields: [...]
        relations: [...]
    """
    if not isinstance(definition, Mapping):
        raise SchemaDefinitionError("Schema definition must be a mapping")

    raw_collections = definition.get("collections") or {}
    if isinstance(raw_collections, list):
        raw_collections = {
            c.get("collection"): c for c in raw_collections if isinstance(c, Mapping)
        }

    if not isinstance(raw_collections, Mapping):
        raise SchemaDefinitionError("'collections' must be a list or a mapping")

    collections: Dict[str, CollectionSchema] = {}
    for name, raw in raw_collections.items():
        if not name:
            raise SchemaDefinitionError("Collection without a name")

        raw = raw or {}
        if not isinstance(raw, Mapping):
            raise SchemaDefinitionError(f"Collection '{name}' must be a mapping")

        collections[name] = CollectionSchema.from_attributes(
            name,
            _field_attribute_list(name, raw.get("fields")),
            note=raw.get("note"),
        )

    relations = definition.get("relations") or []
    if not isinstance(relations, list):
        raise SchemaDefinitionError("'relations' must be a list")
    if not all(isinstance(r, Mapping) for r in relations):
        raise SchemaDefinitionError("Every entry in 'relations' must be a mapping")

    attach_relationships(collections, relations)
    return collections


class SchemaFileAdapter:
    """
    Schema introspection source backed by a YAML or JSON file.
    """

    def __init__(self, file_path: str):
        self.file_path = file_path

    def _read_definition(self) -> Dict[str, Any]:
        if not os.path.exists(self.file_path):
            raise FileNotFoundError(f"Schema file not found: {self.file_path}")

        with open(self.file_path, "r", encoding="utf-8") as f:
            if self.file_path.lower().endswith(".json"):
                try:
                    return json.load(f)
                except json.JSONDecodeError as e:
                    raise SchemaDefinitionError(f"Invalid JSON schema file: {e}") from e

            try:
                return yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise SchemaDefinitionError(f"Invalid YAML schema file: {e}") from e

    # ==================================================
    # ENTRYPOINT
    # ==================================================
    def parse(self) -> Dict[str, CollectionSchema]:
        collections = build_collections(self._read_definition())

        log_event("SCHEMA_LOADED", {
            "source_file": self.file_path,
            "collections": sorted(collections),
            "field_count": sum(len(c.fields) for c in collections.values()),
        })
        return collections

    def get_collection(self, name: str) -> Optional[CollectionSchema]:
        return self.parse().get(name)
