import pytest
from fastapi.testclient import TestClient

from schemakit.main import app
from schemakit.security import jwt_utils


@pytest.fixture
def client():
    return TestClient(app)


class TestCastRecords:
    def test_single_record_with_fields(self, client):
        response = client.post("/cast-records", json={
            "fields": [{"field": "id", "type": "integer"}],
            "records": {"id": "5", "name": "x"},
        })
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "SUCCESS"
        assert body["records"] == {"id": 5, "name": "x"}
        assert body["user_id"] == "anonymous"

    def test_batch_with_schema_definition(self, client, schema_definition):
        response = client.post("/cast-records", json={
            "schema": schema_definition,
            "collection": "articles",
            "records": [
                {"id": "1", "views": "10", "published": "1"},
                {"id": "2", "meta": '{"tags": ["a"]}'},
            ],
        })
        assert response.status_code == 200
        assert response.json()["records"] == [
            {"id": 1, "views": 10, "published": True},
            {"id": 2, "meta": {"tags": ["a"]}},
        ]

    def test_identity_from_bearer_token(self, client):
        token = jwt_utils.encode({"sub": "user-42"}, "secret")
        response = client.post(
            "/cast-records",
            json={"fields": [], "records": [], "user_id": "ignored"},
            headers={"Authorization": f"Bearer {token}"},
        )
        assert response.json()["user_id"] == "user-42"

    def test_identity_from_payload(self, client):
        response = client.post("/cast-records", json={
            "fields": [], "records": [], "user_id": "cli_user",
        })
        assert response.json()["user_id"] == "cli_user"

    def test_missing_records_is_client_error(self, client):
        response = client.post("/cast-records", json={"fields": []})
        assert response.status_code == 422
        assert response.json()["detail"]["status"] == "ERROR"

    def test_ambiguous_collection_is_client_error(self, client, schema_definition):
        response = client.post("/cast-records", json={
            "schema": schema_definition,
            "records": [],
        })
        assert response.status_code == 422
        assert "collection" in response.json()["detail"]["message"]

    def test_unknown_collection(self, client, schema_definition):
        response = client.post("/cast-records", json={
            "schema": schema_definition,
            "collection": "nope",
            "records": [],
        })
        assert response.status_code == 422


class TestDescribeFields:
    def test_describe(self, client, schema_definition):
        response = client.post("/describe-fields", json={
            "schema": schema_definition,
            "collection": "users",
        })
        assert response.status_code == 200
        body = response.json()
        assert body["collection"] == "users"
        assert [f["field"] for f in body["fields"]] == ["id", "articles"]
        assert body["fields"][1]["relationship"]["type"] == "O2M"

    def test_describe_requires_fields_or_schema(self, client):
        response = client.post("/describe-fields", json={})
        assert response.status_code == 422


class TestPayloadValidation:
    def test_position_keyed_records_object(self, client):
        response = client.post("/cast-records", json={
            "fields": [{"field": "id", "type": "integer"}],
            "records": {"0": {"id": "1"}, "1": {"id": "2", "name": "b"}},
        })
        assert response.status_code == 200
        assert response.json()["records"] == {"0": {"id": 1}, "1": {"id": 2, "name": "b"}}

    @pytest.mark.parametrize("records", [[1], [{"id": "1"}, "x"], {"0": 5}, "text"])
    def test_non_object_records_are_client_errors(self, client, records):
        response = client.post("/cast-records", json={
            "fields": [{"field": "id", "type": "integer"}],
            "records": records,
        })
        assert response.status_code == 422
        assert response.json()["detail"]["status"] == "ERROR"

    def test_non_object_field_is_client_error(self, client):
        response = client.post("/cast-records", json={
            "fields": [{"field": "id", "type": "integer"}, 3],
            "records": [],
        })
        assert response.status_code == 422

    @pytest.mark.parametrize("schema", [
        {"collections": {"a": ["not", "a", "mapping"]}},
        {"collections": {"a": {"fields": {"id": 5}}}},
        {"collections": {"a": {"fields": []}}, "relations": [1]},
    ])
    def test_malformed_schema_is_client_error(self, client, schema):
        response = client.post("/cast-records", json={"schema": schema, "records": []})
        assert response.status_code == 422
