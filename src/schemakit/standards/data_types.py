from typing import Dict, Iterable, Optional


# -------------------------------------------------
# Logical type names
# -------------------------------------------------
TYPE_ALIAS = "alias"
TYPE_ARRAY = "array"
TYPE_BOOLEAN = "boolean"
TYPE_BOOL = "bool"
TYPE_GROUP = "group"
TYPE_JSON = "json"
TYPE_TINY_JSON = "tinyjson"
TYPE_MEDIUM_JSON = "mediumjson"
TYPE_LONG_JSON = "longjson"
TYPE_M2M = "m2m"
TYPE_O2M = "o2m"
TYPE_TRANSLATION = "translation"

# System sentinels
TYPE_PRIMARY_KEY = "primary_key"
TYPE_STATUS = "status"
TYPE_SORT = "sort"
TYPE_DATETIME_CREATED = "datetime_created"
TYPE_USER_CREATED = "user_created"
TYPE_DATETIME_MODIFIED = "datetime_modified"
TYPE_USER_MODIFIED = "user_modified"


class DataTypeCatalog:
    """
    Fixed classification tables for logical field types.

    Every lookup is case-insensitive and total: unknown types are simply
    not members of any family and translate to themselves.
    """

    ALIAS_TYPES = frozenset({
        TYPE_ALIAS,
        TYPE_M2M,
        TYPE_O2M,
        TYPE_GROUP,
        TYPE_TRANSLATION,
    })

    SYSTEM_DATE_TYPES = frozenset({
        TYPE_DATETIME_CREATED,
        TYPE_DATETIME_MODIFIED,
    })

    SYSTEM_USER_TYPES = frozenset({
        TYPE_USER_CREATED,
        TYPE_USER_MODIFIED,
    })

    ARRAY_TYPES = frozenset({TYPE_ARRAY})

    JSON_TYPES = frozenset({
        TYPE_JSON,
        TYPE_TINY_JSON,
        TYPE_MEDIUM_JSON,
        TYPE_LONG_JSON,
    })

    BOOLEAN_TYPES = frozenset({TYPE_BOOLEAN, TYPE_BOOL})

    # Logical-only types -> engine storable type
    _NATIVE_STORAGE = {
        TYPE_ARRAY: "text",
        TYPE_JSON: "text",
        TYPE_TINY_JSON: "tinytext",
        TYPE_MEDIUM_JSON: "mediumtext",
        TYPE_LONG_JSON: "longtext",
    }

    # Keyed by upper-case native type
    _DEFAULT_LENGTHS = {
        "CHAR": 1,
        "VARCHAR": 255,
        "INT": 11,
        "INTEGER": 11,
    }

    @staticmethod
    def _normalize(type_name: Optional[str]) -> str:
        return (type_name or "").lower()

    @classmethod
    def is_alias_type(cls, type_name: Optional[str]) -> bool:
        return cls._normalize(type_name) in cls.ALIAS_TYPES

    @classmethod
    def is_system_date_type(cls, type_name: Optional[str]) -> bool:
        return cls._normalize(type_name) in cls.SYSTEM_DATE_TYPES

    @classmethod
    def is_system_user_type(cls, type_name: Optional[str]) -> bool:
        return cls._normalize(type_name) in cls.SYSTEM_USER_TYPES

    @classmethod
    def is_array_type(cls, type_name: Optional[str]) -> bool:
        return cls._normalize(type_name) in cls.ARRAY_TYPES

    @classmethod
    def is_json_type(cls, type_name: Optional[str]) -> bool:
        return cls._normalize(type_name) in cls.JSON_TYPES

    @classmethod
    def is_boolean_type(cls, type_name: Optional[str]) -> bool:
        return cls._normalize(type_name) in cls.BOOLEAN_TYPES

    @classmethod
    def is_type(cls, type_name: Optional[str], type_list: Iterable[str]) -> bool:
        """
        Membership of the lower-cased type in the given list.
        The list itself is expected to hold lower-case names.
        """
        return cls._normalize(type_name) in type_list

    @classmethod
    def native_storage_type(cls, type_name: Optional[str]) -> Optional[str]:
        """
        Map a logical-only type to the type the storage engine stores it as.
        Anything not in the table passes through unchanged.
        """
        return cls._NATIVE_STORAGE.get(cls._normalize(type_name), type_name)

    @classmethod
    def default_lengths(cls) -> Dict[str, int]:
        return dict(cls._DEFAULT_LENGTHS)

    @classmethod
    def default_length(cls, type_name: Optional[str]) -> Optional[int]:
        return cls._DEFAULT_LENGTHS.get((type_name or "").upper())
