# src/todo_sync/remote/client.py

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from ..core.errors import RemoteError
from ..core.models import Task, TaskFields, TaskId
from .wire import create_body, replace_body, task_from_wire, tasks_from_wire

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:5000/api"


def _item_path(task_id: TaskId) -> str:
    # Ids are opaque to the client; keep "/", "?" and "#" inside the path segment.
    return f"/todos/{quote(str(task_id), safe='')}"


def make_timeout(connect_s: float, read_s: float) -> httpx.Timeout:
    """
    Transport timeouts. The sync layer itself never times out a call;
    whatever httpx enforces here is the only limit.
    """
    return httpx.Timeout(
        connect=connect_s,
        read=read_s,
        write=10.0,
        pool=connect_s,
    )


class RemoteTaskClient:
    """
    Thin async wrapper around the store's /todos endpoints.

    - GET    /todos        -> list
    - POST   /todos        -> create   (body: title, description)
    - PUT    /todos/{id}   -> replace  (body: title, description, completed)
    - DELETE /todos/{id}   -> remove

    Every failure (non-2xx, network fault, timeout, unreadable JSON) surfaces as
    RemoteError. Nothing is retried here.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        timeout: httpx.Timeout | float | None = None,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._owns_http = http is None
        if http is None:
            http = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=timeout if timeout is not None else make_timeout(5.0, 25.0),
                headers={"Content-Type": "application/json"},
            )
        self._http = http

    @property
    def base_url(self) -> str:
        return self._base_url

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> RemoteTaskClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # ---- low-level helpers ----

    async def _request(self, method: str, path: str, *, json: Any = None) -> httpx.Response:
        try:
            response = await self._http.request(method, path, json=json)
        except httpx.TimeoutException as e:
            logger.info("Store request timed out: %s %s", method, path)
            raise RemoteError(0, f"Timeout: {e.__class__.__name__}") from e
        except httpx.HTTPError as e:
            logger.info("Store request failed: %s %s (%s)", method, path, e.__class__.__name__)
            raise RemoteError(0, f"Network error: {e}") from e

        if not response.is_success:
            reason = response.reason_phrase or "Error"
            logger.info("Store responded %s to %s %s", response.status_code, method, path)
            raise RemoteError(response.status_code, f"HTTP {response.status_code}: {reason}")

        logger.debug("Store %s %s -> %s", method, path, response.status_code)
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise RemoteError(0, "Store returned an invalid JSON body") from e

    # ---- public API ----

    async def list(self) -> list[Task]:
        response = await self._request("GET", "/todos")
        return tasks_from_wire(self._json(response))

    async def create(self, fields: TaskFields) -> Task:
        response = await self._request("POST", "/todos", json=create_body(fields))
        return task_from_wire(self._json(response))

    async def replace(self, task_id: TaskId, fields: TaskFields) -> Task:
        response = await self._request("PUT", _item_path(task_id), json=replace_body(fields))
        return task_from_wire(self._json(response))

    async def remove(self, task_id: TaskId) -> None:
        # Response body (if any) is ignored.
        await self._request("DELETE", _item_path(task_id))
