import logging
from typing import Any, Dict, List, Mapping

from fastapi import Request

from schemakit.adapters.schema_file_adapter import build_collections
from schemakit.canonical.collection import CollectionSchema
from schemakit.canonical.field import FieldDescriptor
from schemakit.pipeline.schema_caster import SchemaCaster, is_batch_mapping
from schemakit.observability.logger import log_event, generate_request_id, RequestTimer
from schemakit.observability.identity import extract_user_identity
from schemakit.utils.exceptions import SchemaDefinitionError


def _resolve_collection(payload: Dict) -> CollectionSchema:
    """
    Payload carries either a full schema definition plus a collection name,
    or a bare list of field attribute mappings.
    """
    if "schema" in payload:
        collections = build_collections(payload["schema"])
        name = payload.get("collection")

        if name is None:
            if len(collections) != 1:
                raise SchemaDefinitionError(
                    "'collection' is required when the schema defines several collections"
                )
            name = next(iter(collections))

        if name not in collections:
            raise SchemaDefinitionError(f"Unknown collection: {name}")
        return collections[name]

    if "fields" in payload:
        raw_fields = payload["fields"]
        if not isinstance(raw_fields, list):
            raise SchemaDefinitionError("'fields' must be a list")
        if not all(isinstance(f, Mapping) for f in raw_fields):
            raise SchemaDefinitionError("Every entry in 'fields' must be an object")
        return CollectionSchema.from_attributes(
            payload.get("collection") or "",
            raw_fields,
        )

    raise SchemaDefinitionError("Payload must contain 'schema' or 'fields'")


def _validate_records(records: Any) -> None:
    if isinstance(records, list):
        entries = records
    elif isinstance(records, Mapping):
        entries = list(records.values()) if is_batch_mapping(records) else [records]
    else:
        raise SchemaDefinitionError("'records' must be an object or a list of objects")

    if not all(isinstance(r, Mapping) for r in entries):
        raise SchemaDefinitionError("Every record in 'records' must be an object")


def _record_count(records: Any) -> int:
    if isinstance(records, list):
        return len(records)
    if isinstance(records, Mapping):
        return len(records) if is_batch_mapping(records) else 1
    return 0


def describe_fields(payload: Dict) -> Dict:
    collection = _resolve_collection(payload)
    return {
        "status": "SUCCESS",
        **collection.serialize(),
    }


# ==========================================================
# ROUTER
# ==========================================================
def route(payload: Dict, request: Request) -> Dict:
    """
    Record casting entry point.

    Flow:
    Payload → Collection snapshot → SchemaCaster → typed records
    """

    request_id = generate_request_id()
    user_id = extract_user_identity(request, payload)
    timer = RequestTimer()

    log_event("RECORD_CAST_STARTED", {
        "request_id": request_id,
        "user_id": user_id,
        "collection": payload.get("collection"),
    })

    try:
        if "records" not in payload:
            raise SchemaDefinitionError("Payload must contain 'records'")

        records = payload["records"]
        _validate_records(records)

        collection = _resolve_collection(payload)
        fields: List[FieldDescriptor] = collection.get_non_alias_fields()

        caster = SchemaCaster()
        casted = caster.cast_record_values(records, fields)

    except Exception as e:
        log_event("RECORD_CAST_FAILED", {
            "request_id": request_id,
            "error": str(e),
        }, level=logging.ERROR)
        raise

    log_event("RECORD_CAST_COMPLETED", {
        "request_id": request_id,
        "collection": collection.name,
        "record_count": _record_count(records),
        "duration_seconds": timer.duration(),
    })

    return {
        "status": "SUCCESS",
        "request_id": request_id,
        "user_id": user_id,
        "collection": collection.name,
        "records": casted,
    }
