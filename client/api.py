"""Async HTTP client for the task store REST API."""
from datetime import datetime
from typing import Any, List, Optional, Tuple, Type, TypeVar

import httpx
from loguru import logger
from pydantic import BaseModel, ValidationError

from client.config import ClientSettings
from client.errors import AuthenticationError, NetworkError, NotFoundError, ServerError
from client.models import Priority, Project, Task, TaskStatus, User
from client.session import Session

M = TypeVar("M", bound=BaseModel)


class _AuthPayload(BaseModel):
    token: str
    user: User


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("msg")
        if detail:
            return detail if isinstance(detail, str) else str(detail)
    return response.reason_phrase


def _parse(model: Type[M], data: Any) -> M:
    """Validate a 2xx payload; a malformed one is the server's fault."""
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ServerError(f"Malformed {model.__name__} in response: {exc.error_count()} error(s)") from exc


def _parse_list(model: Type[M], data: Any) -> List[M]:
    if not isinstance(data, list):
        raise ServerError(f"Expected a list of {model.__name__} in response")
    return [_parse(model, item) for item in data]


class TaskStoreClient:
    """Thin wrapper over ``httpx.AsyncClient`` speaking the task store contract.

    Every call carries the session's bearer token. Non-2xx answers and
    transport failures are raised as :class:`~client.errors.ApiError`
    subclasses; the caller decides what a failure means.
    """

    def __init__(
        self,
        session: Session,
        settings: Optional[ClientSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.session = session
        self.settings = settings or ClientSettings()
        self._http = httpx.AsyncClient(
            base_url=self.settings.API_URL.rstrip("/"),
            timeout=self.settings.REQUEST_TIMEOUT,
            transport=transport,
        )

    async def __aenter__(self) -> "TaskStoreClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, json: Any = None) -> Any:
        try:
            response = await self._http.request(method, path, json=json, headers=self.session.auth_headers())
        except httpx.HTTPError as exc:
            logger.warning(f"{method} {path} failed: {exc!r}")
            raise NetworkError(str(exc) or exc.__class__.__name__) from exc

        if response.is_success:
            if not response.content:
                return None
            try:
                return response.json()
            except ValueError as exc:
                raise ServerError(f"{method} {path} returned a non-JSON body", response.status_code) from exc

        message = _error_message(response)
        if response.status_code == 401:
            raise AuthenticationError(message, 401)
        if response.status_code == 404:
            raise NotFoundError(message, 404)
        raise ServerError(message, response.status_code)

    # -------------------- auth --------------------
    async def signup(self, username: str, email: str, password: str) -> Tuple[str, User]:
        data = await self._request(
            "POST", "/auth/signup", json={"username": username, "email": email, "password": password}
        )
        auth = _parse(_AuthPayload, data)
        return auth.token, auth.user

    async def login(self, email: str, password: str) -> Tuple[str, User]:
        data = await self._request("POST", "/auth/login", json={"email": email, "password": password})
        auth = _parse(_AuthPayload, data)
        return auth.token, auth.user

    # -------------------- projects --------------------
    async def list_projects(self) -> List[Project]:
        data = await self._request("GET", "/projects")
        return _parse_list(Project, data)

    async def create_project(self, title: str, description: Optional[str] = None) -> Project:
        data = await self._request("POST", "/projects", json={"title": title, "description": description})
        return _parse(Project, data)

    async def delete_project(self, project_id: int) -> None:
        await self._request("DELETE", f"/projects/{project_id}")

    # -------------------- tasks --------------------
    async def list_tasks(self, project_id: int) -> List[Task]:
        data = await self._request("GET", f"/tasks/{project_id}")
        return _parse_list(Task, data)

    async def create_task(
        self,
        project_id: int,
        title: str,
        description: Optional[str] = None,
        priority: Priority = Priority.MEDIUM,
        assigned_to: Optional[int] = None,
        due_date: Optional[datetime] = None,
    ) -> Task:
        body = {
            "projectId": project_id,
            "title": title,
            "description": description,
            "priority": Priority(priority).value,
            "assignedTo": assigned_to,
            "dueDate": due_date.isoformat() if due_date else None,
        }
        data = await self._request("POST", "/tasks", json=body)
        return _parse(Task, data)

    async def update_task_status(self, task_id: int, status: TaskStatus) -> Task:
        data = await self._request("PATCH", f"/tasks/{task_id}", json={"status": TaskStatus(status).value})
        return _parse(Task, data)

    async def delete_task(self, task_id: int) -> None:
        await self._request("DELETE", f"/tasks/{task_id}")
