# tests/test_remote_client.py

from __future__ import annotations

import json
from datetime import UTC, datetime

import httpx
import pytest

from todo_sync.core.errors import RemoteError
from todo_sync.core.models import TaskFields
from todo_sync.remote.client import RemoteTaskClient
from todo_sync.remote.wire import task_from_wire

BASE = "http://store.test/api"


def _client(handler) -> RemoteTaskClient:
    http = httpx.AsyncClient(base_url=BASE, transport=httpx.MockTransport(handler))
    return RemoteTaskClient(BASE, http=http)


def _todo(**overrides) -> dict:
    data = {
        "id": 1,
        "title": "A",
        "description": "",
        "completed": False,
        "created_at": "2026-01-02T03:04:05Z",
    }
    data.update(overrides)
    return data


@pytest.mark.asyncio
async def test_list_parses_todos() -> None:
    seen: list[tuple[str, str]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path))
        return httpx.Response(200, json=[_todo(), _todo(id=2, title="B", completed=True)])

    tasks = await _client(handler).list()

    assert seen == [("GET", "/api/todos")]
    assert [(t.id, t.title, t.completed) for t in tasks] == [(1, "A", False), (2, "B", True)]
    assert tasks[0].created_at == datetime(2026, 1, 2, 3, 4, 5, tzinfo=UTC)


@pytest.mark.asyncio
async def test_create_posts_title_and_description() -> None:
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "POST"
        assert request.url.path == "/api/todos"
        bodies.append(json.loads(request.content))
        return httpx.Response(201, json=_todo(id=3, title="Buy milk"))

    task = await _client(handler).create(TaskFields(title="Buy milk"))

    assert bodies == [{"title": "Buy milk", "description": ""}]
    assert task.id == 3 and task.title == "Buy milk"


@pytest.mark.asyncio
async def test_replace_puts_full_field_set() -> None:
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert (request.method, request.url.path) == ("PUT", "/api/todos/7")
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json=_todo(id=7, title="T", completed=True))

    task = await _client(handler).replace(7, TaskFields(title="T", completed=True))

    assert bodies == [{"title": "T", "description": "", "completed": True}]
    assert task.completed is True


@pytest.mark.asyncio
async def test_remove_ignores_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert (request.method, request.url.path) == ("DELETE", "/api/todos/2")
        return httpx.Response(204)

    assert await _client(handler).remove(2) is None


@pytest.mark.asyncio
async def test_opaque_ids_stay_in_one_path_segment() -> None:
    seen: list[bytes] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.raw_path)
        return httpx.Response(204)

    await _client(handler).remove("a/b?c#d")

    assert seen == [b"/api/todos/a%2Fb%3Fc%23d"]


@pytest.mark.asyncio
async def test_non_success_status_becomes_remote_error() -> None:
    client = _client(lambda request: httpx.Response(500))

    with pytest.raises(RemoteError) as info:
        await client.remove(2)

    assert info.value.status_code == 500
    assert info.value.message == "HTTP 500: Internal Server Error"


@pytest.mark.asyncio
async def test_transport_fault_becomes_remote_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RemoteError) as info:
        await _client(handler).list()

    assert info.value.status_code == 0


@pytest.mark.asyncio
async def test_timeout_becomes_remote_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(RemoteError) as info:
        await _client(handler).list()

    assert info.value.status_code == 0
    assert "Timeout" in info.value.message


@pytest.mark.asyncio
async def test_invalid_json_becomes_remote_error() -> None:
    client = _client(lambda request: httpx.Response(200, content=b"<html>"))

    with pytest.raises(RemoteError):
        await client.list()


def test_wire_ids_and_timestamps() -> None:
    assert task_from_wire(_todo(id="12")).id == 12
    assert task_from_wire(_todo(id="abc")).id == "abc"
    assert task_from_wire(_todo(created_at=None)).created_at is None

    with pytest.raises(RemoteError):
        task_from_wire(_todo(id="local:1"))
    with pytest.raises(RemoteError):
        task_from_wire(_todo(id=None))
    with pytest.raises(RemoteError):
        task_from_wire(["not", "an", "object"])
