"""Outcome to HTTP translation."""

import json

from services.results import Result
from utils.responses import outcome_response, read_response, validation_response


def _body(resp):
    return json.loads(resp.get_body())


def test_ok_envelope_projects_rows(services, alice, vehicle):
    resp = outcome_response(Result.ok(vehicle))
    assert resp.status_code == 200
    body = _body(resp)
    assert body["result"] == 200
    assert body["data"]["id"] == vehicle.id
    assert body["data"]["type"] == "car"
    assert resp.headers["Access-Control-Allow-Origin"] == "*"


def test_user_rows_are_stripped_in_responses(alice):
    data = _body(outcome_response(Result.ok(alice)))["data"]
    assert data["username"] == "alice"
    assert "password_hash" not in data and "email" not in data


def test_denied_and_missing():
    denied = outcome_response(Result.denied())
    assert denied.status_code == 401
    assert _body(denied) == {"errors": [{"msg": "Unauthorized"}]}
    assert outcome_response(Result.not_found()).status_code == 404


def test_delete_count_passes_through():
    assert _body(outcome_response(Result.ok(1)))["data"] == 1


def test_reads(services, event):
    assert read_response(None).status_code == 404
    listed = _body(read_response(services.events.list()))
    assert [e["id"] for e in listed["data"]] == [event.id]
    assert listed["data"][0]["date"] == "2023-06-12"


def test_validation_response():
    resp = validation_response([{"msg": "Invalid type"}])
    assert resp.status_code == 422
    assert _body(resp)["errors"][0]["msg"] == "Invalid type"
