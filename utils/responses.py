import json
from typing import Any, Callable, List, Optional, Union

import azure.functions as func

from services.projections import project
from services.results import Outcome, Result

_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,POST,PUT,DELETE,OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


def cors_response(
    body: Union[str, bytes] = b"",
    status: int = 200,
    mime: str = "text/plain"
) -> func.HttpResponse:
    return func.HttpResponse(
        body=body,
        status_code=status,
        mimetype=mime,
        headers=dict(_CORS_HEADERS),
    )


def json_response(payload: Any, status: int = 200) -> func.HttpResponse:
    return cors_response(json.dumps(payload, default=str), status, "application/json")


def ok_response(data: Any) -> func.HttpResponse:
    return json_response({"result": 200, "data": data}, 200)


def unauthorized_response() -> func.HttpResponse:
    return json_response({"errors": [{"msg": "Unauthorized"}]}, 401)


def not_found_response() -> func.HttpResponse:
    return cors_response("Not found", 404)


def validation_response(errors: List[dict]) -> func.HttpResponse:
    return json_response({"errors": errors}, 422)


def outcome_response(
    result: Result,
    projector: Optional[Callable[[Any], Any]] = None,
) -> func.HttpResponse:
    """Translate a service Result: Ok -> 200 envelope, denied -> 401, missing -> 404."""
    if result.outcome is Outcome.AUTHORIZATION_DENIED:
        return unauthorized_response()
    if result.outcome is Outcome.NOT_FOUND:
        return not_found_response()
    return ok_response((projector or project)(result.data))


def read_response(data: Any, projector: Optional[Callable[[Any], Any]] = None) -> func.HttpResponse:
    """For plain reads: None -> 404, anything else -> 200 envelope."""
    if data is None:
        return not_found_response()
    return ok_response((projector or project)(data))
