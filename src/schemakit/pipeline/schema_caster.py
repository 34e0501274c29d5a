from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Type, Union

from schemakit.canonical.field import FieldDescriptor
from schemakit.pipeline.value_caster import ValueCaster, cast_value
from schemakit.standards.data_types import DataTypeCatalog

Record = Dict[str, Any]


def is_batch_mapping(records: Mapping) -> bool:
    """
    True when the mapping's keys are exactly 0..n-1 (a batch keyed by
    position rather than a single record keyed by field name).

    Decimal string keys count as positions ("0", "1"), since JSON objects
    cannot carry integer keys.
    """
    if not records:
        return False

    positions = set()
    for key in records:
        if isinstance(key, bool):
            return False
        if isinstance(key, int):
            positions.add(key)
        elif isinstance(key, str) and key.isdecimal() and str(int(key)) == key:
            positions.add(int(key))
        else:
            return False

    return positions == set(range(len(records)))


class SchemaCaster:
    """
    Rewrites record values according to their fields' logical types.

    Input records are never mutated; casting works on copies. Fields
    missing from a record are not added to it.
    """

    def __init__(
        self,
        value_caster: Optional[ValueCaster] = None,
        catalog: Type[DataTypeCatalog] = DataTypeCatalog,
    ):
        self.value_caster = value_caster or cast_value
        self.catalog = catalog

    # -------------------------------------------------
    # Casting
    # -------------------------------------------------
    def cast_value(self, value: Any, logical_type: Optional[str]) -> Any:
        return self.value_caster(value, logical_type)

    def cast_one(self, record: Mapping[str, Any], fields: Iterable[FieldDescriptor]) -> Record:
        casted = dict(record)
        for f in fields:
            name = f.get_name()
            if name in casted:
                casted[name] = self.cast_value(casted[name], f.get_type())
        return casted

    def cast_many(
        self,
        records: Iterable[Mapping[str, Any]],
        fields: Iterable[FieldDescriptor],
    ) -> List[Record]:
        fields = list(fields)
        return [self.cast_one(record, fields) for record in records]

    def cast_record_values(
        self,
        records: Union[Mapping[Any, Any], Sequence[Mapping[str, Any]]],
        fields: Iterable[FieldDescriptor],
    ) -> Union[Record, List[Record], Dict[int, Record]]:
        """
        Shape-preserving entry point for callers that do not know whether
        they hold one record or many.

        - list / tuple -> list of records
        - mapping keyed 0..n-1 -> mapping with the same keys
        - any other mapping -> single record
        """
        fields = list(fields)

        if isinstance(records, Mapping):
            if is_batch_mapping(records):
                return {
                    index: self.cast_one(record, fields)
                    for index, record in records.items()
                }
            return self.cast_one(records, fields)

        return self.cast_many(records, fields)

    parse_record_values_by_type = cast_record_values

    # -------------------------------------------------
    # Catalog proxies
    # -------------------------------------------------
    def get_default_lengths(self) -> Dict[str, int]:
        return self.catalog.default_lengths()

    def get_column_default_length(self, type_name: Optional[str]) -> Optional[int]:
        return self.catalog.default_length(type_name)

    def get_data_type(self, type_name: Optional[str]) -> Optional[str]:
        return self.catalog.native_storage_type(type_name)

    def is_type(self, type_name: Optional[str], type_list: Iterable[str]) -> bool:
        return self.catalog.is_type(type_name, type_list)
