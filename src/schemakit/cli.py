import argparse
import json
import os
import sys
from typing import Any, Dict, Optional

from schemakit.adapters.schema_file_adapter import SchemaFileAdapter
from schemakit.canonical.collection import CollectionSchema
from schemakit.pipeline.schema_caster import SchemaCaster
from schemakit.observability.logger import log_event, RequestTimer
from schemakit.utils.exceptions import SchemaDefinitionError


class C:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    RED = "\033[31m"
    GREEN = "\033[32m"


def cprint(text: str, color: str = C.RESET, bold: bool = False):
    if not sys.stdout.isatty():
        print(text)
        return
    prefix = (C.BOLD if bold else "") + color
    print(f"{prefix}{text}{C.RESET}")


def _read_json(path: str) -> Any:
    if not os.path.exists(path):
        raise FileNotFoundError(f"Records file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _write_json(path: str, payload: Any) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, default=str)


def _select_collection(
    collections: Dict[str, CollectionSchema],
    name: Optional[str],
) -> CollectionSchema:
    if name is None:
        if len(collections) != 1:
            raise SchemaDefinitionError(
                "--collection is required when the schema defines several collections"
            )
        return next(iter(collections.values()))

    if name not in collections:
        raise SchemaDefinitionError(f"Unknown collection: {name}")
    return collections[name]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Cast records by their schema field types")

    parser.add_argument("--schema", required=True, help="Path to YAML or JSON schema file")
    parser.add_argument("--collection", help="Collection name inside the schema file")
    parser.add_argument("--records", help="Path to JSON file with one record or a list of records")
    parser.add_argument("--output", help="Write the result to this JSON file instead of stdout")
    parser.add_argument(
        "--describe",
        action="store_true",
        help="Print the collection's serialized fields instead of casting",
    )
    return parser


def run(args: argparse.Namespace) -> Any:
    collections = SchemaFileAdapter(args.schema).parse()
    collection = _select_collection(collections, args.collection)

    if args.describe:
        return collection.serialize()

    if not args.records:
        raise SchemaDefinitionError("--records is required unless --describe is given")

    timer = RequestTimer()
    records = _read_json(args.records)
    casted = SchemaCaster().cast_record_values(records, collection.get_non_alias_fields())

    log_event("RECORD_CAST_COMPLETED", {
        "collection": collection.name,
        "record_count": len(records) if isinstance(records, list) else 1,
        "duration_seconds": timer.duration(),
    })
    return casted


def main(argv=None):
    args = build_parser().parse_args(argv)

    try:
        result = run(args)
    except Exception as e:
        cprint("[FAILED] Record casting failed.", C.RED, bold=True)
        cprint(str(e), C.RED)
        raise SystemExit(1)

    if args.output:
        _write_json(args.output, result)
        cprint(f"[DONE] Output written to: {args.output}", C.GREEN, bold=True)
    else:
        print(json.dumps(result, indent=2, default=str))


if __name__ == "__main__":
    main()
