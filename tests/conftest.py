import json

import pytest
import requests

from xeno_crm.api_client import BackendClient

BASE = "http://backend.test"


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self._body = body
        self._text = text

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._text is not None:
            return json.loads(self._text)
        return self._body


class FakeHTTP:
    """Stands in for requests.Session: scripted responses, recorded calls."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def reply(self, method, path, body=None, status=200, text=None):
        self.routes[(method, path)] = FakeResponse(status, body, text)

    def fail(self, method, path):
        self.routes[(method, path)] = requests.ConnectionError("connection refused")

    def request(self, method, url, json=None, timeout=None):
        path = url[len(BASE):]
        self.calls.append({"method": method, "path": path, "json": json, "timeout": timeout})
        outcome = self.routes.get((method, path))
        if outcome is None:
            return FakeResponse(404, {"message": "not found"})
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def http():
    return FakeHTTP()


@pytest.fixture
def client(http):
    return BackendClient(BASE, timeout=5, session=http)


def segment_record(id=1, name="Big spenders", conditions=None, customers=None):
    if conditions is None:
        conditions = json.dumps({
            "operator": "AND",
            "conditions": [{"field": "totalSpending", "operator": ">=", "value": "500"}],
        })
    return {
        "id": id,
        "name": name,
        "conditions": conditions,
        "createdAt": "2024-12-01T10:00:00.000Z",
        "updatedAt": "2024-12-01T10:00:00.000Z",
        "customers": customers or [],
    }


def customer_record(id=7, name="Asha", email="asha@example.com"):
    return {
        "id": id,
        "name": name,
        "email": email,
        "totalSpending": "1200.00",
        "createdAt": "2024-11-01T10:00:00.000Z",
        "updatedAt": "2024-11-01T10:00:00.000Z",
    }
