from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any

import requests
from pydantic.alias_generators import to_camel

from .models import Task
from .session import Session

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A request that did not come back 2xx; status_code is None for transport errors."""

    def __init__(self, status_code: int | None, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def _wire(fields: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in fields.items():
        if isinstance(value, (datetime, date)):
            value = value.isoformat()
        out[to_camel(key)] = value
    return out


class ApiClient:
    """
    Thin client for the task API.

    Register and login are anonymous; every task call takes the Session it
    acts for and sends its token as a bearer header. ``http`` is anything
    with the requests call shape (``get/post/put/delete(url, json=, headers=)``).
    """

    def __init__(self, base_url: str, http: Any | None = None, timeout: float = 15) -> None:
        self.base_url = base_url.rstrip("/")
        self.http = http if http is not None else requests.Session()
        self.timeout = timeout

    def _request(
        self, method: str, path: str, session: Session | None = None, body: Any = None
    ) -> Any:
        headers = {"Content-Type": "application/json"}
        if session is not None:
            headers["Authorization"] = f"Bearer {session.token}"
        kwargs: dict[str, Any] = {"headers": headers}
        if body is not None:
            kwargs["json"] = body
        if isinstance(self.http, requests.Session):
            kwargs["timeout"] = self.timeout

        try:
            resp = getattr(self.http, method)(f"{self.base_url}/api{path}", **kwargs)
        except requests.RequestException as e:
            logger.warning("%s %s failed: %r", method.upper(), path, e)
            raise ApiError(None, "Network error") from e

        try:
            data = resp.json()
        except ValueError:
            data = None
        if not 200 <= resp.status_code < 300:
            message = data.get("error") if isinstance(data, dict) else None
            logger.info("%s %s -> %s", method.upper(), path, resp.status_code)
            raise ApiError(resp.status_code, message or "Request failed")
        return data

    def register(self, email: str, password: str) -> str:
        data = self._request("post", "/register", body={"email": email, "password": password})
        return data["message"]

    def login(self, email: str, password: str) -> Session:
        data = self._request("post", "/login", body={"email": email, "password": password})
        return Session(token=data["token"], email=data["email"])

    def list_tasks(self, session: Session) -> list[Task]:
        data = self._request("get", "/tasks", session)
        return [Task.from_json(item) for item in data or []]

    def create_task(self, session: Session, **fields: Any) -> Task:
        data = self._request("post", "/tasks", session, _wire(fields))
        return Task.from_json(data)

    def update_task(self, session: Session, task_id: str, **fields: Any) -> Task | None:
        data = self._request("put", f"/tasks/{task_id}", session, _wire(fields))
        return Task.from_json(data) if data else None

    def delete_task(self, session: Session, task_id: str) -> None:
        self._request("delete", f"/tasks/{task_id}", session)
