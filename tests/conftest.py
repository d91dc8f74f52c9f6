"""Shared fixtures: an in-memory REST server standing in for the transport."""

import copy
from typing import Any

import pytest

from core.config import AppSettings
from core.domain.http import RawResponse
from core.errors import BadRequestError, NotFoundError, TransportError
from core.services.application import Application
from core.services.event_bus import EventManager

API_URL = "http://test/api"


class FakeRestServer:
    """Minimal JHipster-like REST API over dicts, keyed by collection."""

    def __init__(self, api_url: str = API_URL, first_id: int = 1) -> None:
        self.api_url = api_url
        self.collections: dict[str, dict[int, dict]] = {}
        self.requests: list[tuple[str, str, Any, list]] = []
        self.next_id = first_id
        self.fail_with: Exception | None = None

    def seed(self, collection: str, *records: dict) -> None:
        store = self.collections.setdefault(collection, {})
        for record in records:
            store[record["id"]] = copy.deepcopy(record)
            self.next_id = max(self.next_id, record["id"] + 1)

    async def request(self, method, url, *, json=None, params=None, headers=None) -> RawResponse:
        self.requests.append((method, url, copy.deepcopy(json), list(params or [])))
        if self.fail_with is not None:
            exc, self.fail_with = self.fail_with, None
            raise exc

        parts = url[len(self.api_url) + 1:].split("/")
        if parts[0] == "_search":
            return self._search(parts[1], dict(params or []))
        store = self.collections.setdefault(parts[0], {})

        if len(parts) == 1:
            if method == "POST":
                return self._create(parts[0], store, json)
            if method == "PUT":
                if json.get("id") is None:
                    return self._create(parts[0], store, json)
                store[json["id"]] = copy.deepcopy(json)
                return RawResponse(200, {"x-app-alert": "updated"}, copy.deepcopy(json))
            if method == "GET":
                return self._page(list(store.values()), params or [])

        entity_id = int(parts[1])
        if entity_id not in store:
            raise NotFoundError(404, "Not Found", body={"status": 404})
        if method == "GET":
            return RawResponse(200, {}, copy.deepcopy(store[entity_id]))
        if method == "DELETE":
            del store[entity_id]
            return RawResponse(200, {"x-app-alert": "deleted"}, None)
        raise AssertionError(f"unexpected {method} {url}")

    def _create(self, collection: str, store: dict, json: dict) -> RawResponse:
        if json.get("id") is not None:
            raise BadRequestError(
                400,
                "A new entity cannot already have an ID",
                headers={"x-app-error": "error.idexists"},
            )
        record = copy.deepcopy(json)
        record["id"] = self.next_id
        self.next_id += 1
        store[record["id"]] = record
        headers = {"location": f"/api/{collection}/{record['id']}"}
        return RawResponse(201, headers, copy.deepcopy(record))

    def _page(self, records: list[dict], params) -> RawResponse:
        values = dict(params)
        records = sorted(records, key=lambda r: r["id"])
        if values.get("sort", "").endswith(",desc"):
            records.reverse()
        page = int(values.get("page", 0))
        size = int(values.get("size", 20))
        chunk = records[page * size:(page + 1) * size]
        headers = {"X-Total-Count": str(len(records))}
        return RawResponse(200, headers, copy.deepcopy(chunk))

    def _search(self, collection: str, params: dict) -> RawResponse:
        query = str(params.get("query", "")).lower()
        records = [
            r for r in self.collections.get(collection, {}).values()
            if any(query in str(v).lower() for v in r.values())
        ]
        return self._page(records, list(params.items()))


@pytest.fixture
def server() -> FakeRestServer:
    return FakeRestServer()


@pytest.fixture
def events() -> EventManager:
    return EventManager()


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(api_root="http://test/", items_per_page=20)


@pytest.fixture
def application(settings, server) -> Application:
    return Application.from_settings(settings, transport=server)


@pytest.fixture
def network_down() -> TransportError:
    return TransportError("GET http://test/api: connection refused")
