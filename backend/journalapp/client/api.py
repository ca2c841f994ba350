"""
JournalApp Client — REST API Client
=====================================

What:  Async wrapper around the journal service's HTTP API.
Why:   Callers branch on exception *types* (ValidationError, AuthError,
       NotFoundError, NetworkError) rather than on status codes or message
       strings scattered through UI code.
How:   httpx.AsyncClient with a bounded timeout. Responses are parsed into
       the same Pydantic schemas the server declares.

Status Mapping:
    400, 422          → ValidationError (field violations when available)
    401               → AuthError carrying the server message; the session
                        credential is cleared
    404               → NotFoundError
    429               → RateLimitExceededError
    5xx               → NetworkError (transient)
    transport/timeout → NetworkError
    unreadable body   → NetworkError (success status, but not the API's JSON)

Retry Policy:
    GET requests retry NetworkError with exponential backoff + jitter
    (tenacity). Writes are never retried here; the autosave reconciler
    decides when a failed save is attempted again.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Union
from uuid import UUID

import httpx
from pydantic import TypeAdapter
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from journalapp.client.config import ClientSettings
from journalapp.client.session import ClientSession
from journalapp.exceptions import (
    AuthError,
    JournalAppError,
    NetworkError,
    NotFoundError,
    RateLimitExceededError,
    ValidationError,
)
from journalapp.schemas.entry import EntryResponse, StreakResponse
from journalapp.schemas.user import AuthResponse, UserProfile

logger = logging.getLogger(__name__)

EntryId = Union[str, UUID]


def _error_payload(response: httpx.Response) -> Dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _decode(response: httpx.Response, schema: Any) -> Any:
    """
    Parse a success body against `schema` (a model or e.g. List[model]).

    A 200 that is not JSON, or not the shape the API sends (a captive portal
    page, a truncated body), is raised as NetworkError so callers treat it
    like any other failed round trip.
    """
    try:
        return TypeAdapter(schema).validate_python(response.json())
    except ValueError as e:
        # JSONDecodeError and pydantic.ValidationError are both ValueErrors
        raise NetworkError(
            "The journal service sent an unreadable response",
            status_code=response.status_code,
            context={"path": response.request.url.path, "reason": type(e).__name__},
        ) from e


def _violations_from(payload: Dict[str, Any]) -> Dict[str, str]:
    """Field violations from our error envelope or from FastAPI's 422 body."""
    details = payload.get("details") or {}
    if isinstance(details, dict) and isinstance(details.get("violations"), dict):
        return {str(k): str(v) for k, v in details["violations"].items()}

    violations: Dict[str, str] = {}
    for item in payload.get("detail") or []:
        if not isinstance(item, dict):
            continue
        loc = [str(part) for part in item.get("loc", []) if part not in ("body", "query")]
        violations[loc[-1] if loc else "request"] = str(item.get("msg", "Invalid value"))
    return violations


class JournalApiClient:
    """
    One instance per signed-in app session.

    Usage:
        client = JournalApiClient(session, settings)
        await client.login("me@example.com", "secret")
        entry = await client.create_entry("Morning pages", "", date.today())
        await client.aclose()

    `transport` lets tests route requests into an in-process app
    (httpx.ASGITransport) instead of the network.
    """

    def __init__(
        self,
        session: ClientSession,
        settings: Optional[ClientSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.session = session
        self.settings = settings or ClientSettings()
        self._http = httpx.AsyncClient(
            base_url=self.settings.api_base_url,
            timeout=self.settings.request_timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "JournalApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # ══════════════════════════════════════════════════════════════════════
    # Transport
    # ══════════════════════════════════════════════════════════════════════

    def _headers(self) -> Dict[str, str]:
        if self.session.token:
            return {"Authorization": f"Bearer {self.session.token}"}
        return {}

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        resource: str = "resource",
        resource_id: Optional[str] = None,
    ) -> httpx.Response:
        try:
            response = await self._http.request(
                method, path, json=json, params=params, headers=self._headers()
            )
        except httpx.TimeoutException as e:
            raise NetworkError(
                "The journal service did not answer in time",
                context={"method": method, "path": path},
            ) from e
        except httpx.TransportError as e:
            raise NetworkError(
                "Could not reach the journal service",
                context={"method": method, "path": path, "reason": str(e)},
            ) from e

        self._raise_for_status(response, resource, resource_id)
        return response

    def _raise_for_status(
        self, response: httpx.Response, resource: str, resource_id: Optional[str]
    ) -> None:
        status = response.status_code
        if status < 400:
            return

        payload = _error_payload(response)
        message = payload.get("message") or response.reason_phrase or "Request failed"

        if status in (400, 422):
            violations = _violations_from(payload)
            if status == 422 and violations and not payload.get("message"):
                message = next(iter(violations.values()))
            raise ValidationError(message, violations=violations)

        if status == 401:
            # Any rejected credential means the user must sign in again
            self.session.invalidate()
            raise AuthError(message, context={"status_code": status})

        if status == 404:
            raise NotFoundError(resource, resource_id)

        if status == 429:
            raise RateLimitExceededError(retry_after=int(response.headers.get("Retry-After", "60")))

        if status >= 500:
            logger.warning("Server error %d on %s %s", status, response.request.method, response.request.url.path)
            raise NetworkError(message, status_code=status)

        raise JournalAppError(message, context={"status_code": status})

    async def _get(self, path: str, **kwargs: Any) -> httpx.Response:
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type(NetworkError),
            stop=stop_after_attempt(self.settings.read_retry_attempts),
            wait=wait_exponential_jitter(
                initial=self.settings.read_retry_initial_wait,
                max=self.settings.read_retry_max_wait,
            ),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        ):
            with attempt:
                return await self._request("GET", path, **kwargs)
        raise NetworkError("Retry loop exited without a response")

    # ══════════════════════════════════════════════════════════════════════
    # Accounts
    # ══════════════════════════════════════════════════════════════════════

    def _adopt(self, response: httpx.Response) -> AuthResponse:
        auth = _decode(response, AuthResponse)
        self.session.authenticate(
            auth.token, {"id": str(auth.id), "username": auth.username, "email": auth.email}
        )
        return auth

    async def register(self, username: str, email: str, password: str) -> AuthResponse:
        response = await self._request(
            "POST",
            "/api/users/register",
            json={"username": username, "email": email, "password": password},
        )
        return self._adopt(response)

    async def login(self, email: str, password: str) -> AuthResponse:
        response = await self._request(
            "POST", "/api/users/login", json={"email": email, "password": password}
        )
        return self._adopt(response)

    async def logout(self) -> None:
        self.session.clear()

    async def get_profile(self) -> UserProfile:
        response = await self._get("/api/users/profile")
        return _decode(response, UserProfile)

    # ══════════════════════════════════════════════════════════════════════
    # Journal Entries
    # ══════════════════════════════════════════════════════════════════════

    async def get_entries(self) -> List[EntryResponse]:
        response = await self._get("/api/journal")
        return _decode(response, List[EntryResponse])

    async def get_entry(self, entry_id: EntryId) -> EntryResponse:
        response = await self._get(
            f"/api/journal/{entry_id}", resource="entry", resource_id=str(entry_id)
        )
        return _decode(response, EntryResponse)

    async def search_entries(self, query: str) -> List[EntryResponse]:
        response = await self._get("/api/journal/search", params={"query": query})
        return _decode(response, List[EntryResponse])

    async def get_streak(self) -> StreakResponse:
        response = await self._get("/api/journal/streak")
        return _decode(response, StreakResponse)

    async def create_entry(
        self, title: str, content: str = "", entry_date: Optional[date] = None
    ) -> EntryResponse:
        body: Dict[str, Any] = {"title": title, "content": content}
        if entry_date is not None:
            body["date"] = entry_date.isoformat()
        response = await self._request("POST", "/api/journal", json=body)
        return _decode(response, EntryResponse)

    async def update_entry(
        self,
        entry_id: EntryId,
        title: Optional[str] = None,
        content: Optional[str] = None,
        entry_date: Optional[date] = None,
    ) -> EntryResponse:
        """Partial update: only the fields passed are sent."""
        body: Dict[str, Any] = {}
        if title is not None:
            body["title"] = title
        if content is not None:
            body["content"] = content
        if entry_date is not None:
            body["date"] = entry_date.isoformat()
        response = await self._request(
            "PUT",
            f"/api/journal/{entry_id}",
            json=body,
            resource="entry",
            resource_id=str(entry_id),
        )
        return _decode(response, EntryResponse)

    async def delete_entry(self, entry_id: EntryId) -> None:
        await self._request(
            "DELETE", f"/api/journal/{entry_id}", resource="entry", resource_id=str(entry_id)
        )
