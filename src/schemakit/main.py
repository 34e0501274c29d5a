from fastapi import FastAPI, HTTPException, Request

from schemakit.router import route, describe_fields
from schemakit.utils.exceptions import SchemaKitError

app = FastAPI(
    title="Schema Field Caster",
    version="1.0.0"
)


def _client_error(e: Exception) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail={
            "status": "ERROR",
            "message": str(e),
        }
    )


@app.post("/cast-records")
def cast_records(payload: dict, request: Request):
    try:
        return route(payload, request)
    except (SchemaKitError, ValueError) as e:
        raise _client_error(e)


@app.post("/describe-fields")
def describe(payload: dict):
    try:
        return describe_fields(payload)
    except (SchemaKitError, ValueError) as e:
        raise _client_error(e)
