import pytest
import yaml

from schemakit.canonical.field import FieldDescriptor


SCHEMA_YAML = """
collections:
  articles:
    note: Blog articles
    fields:
      - field: id
        type: integer
        datatype: INT
        primary_key: true
        auto_increment: true
      - field: title
        type: varchar
        length: 255
      - field: views
        type: int
      - field: published
        type: boolean
      - field: meta
        type: json
      - field: author
        type: m2o
        datatype: INT
      - field: comments
        type: o2m
  users:
    fields:
      id:
        type: integer
        primary_key: true
      articles:
        type: o2m
relations:
  - collection_many: articles
    field_many: author
    collection_one: users
    field_one: articles
"""


@pytest.fixture
def schema_file(tmp_path):
    """A YAML schema file with two related collections."""
    path = tmp_path / "schema.yaml"
    path.write_text(SCHEMA_YAML, encoding="utf-8")
    return str(path)


@pytest.fixture
def id_field():
    return FieldDescriptor.from_attributes({
        "id": 1,
        "collection": "articles",
        "field": "id",
        "type": "integer",
        "primary_key": True,
    })


@pytest.fixture
def article_fields(id_field):
    """Typed descriptors for a handful of article columns."""
    return [
        id_field,
        FieldDescriptor.from_attributes({"collection": "articles", "field": "views", "type": "int"}),
        FieldDescriptor.from_attributes({"collection": "articles", "field": "published", "type": "bool"}),
        FieldDescriptor.from_attributes({"collection": "articles", "field": "meta", "type": "json"}),
    ]


@pytest.fixture
def schema_definition():
    """The same schema as schema_file, already parsed."""
    return yaml.safe_load(SCHEMA_YAML)
