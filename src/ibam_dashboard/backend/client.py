"""Supabase REST client for auth (GoTrue) and data (PostgREST)."""

from typing import Any

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from ibam_dashboard.models.auth import AuthSession
from ibam_dashboard.models.progress import ContinueSession, RecentActivity
from ibam_dashboard.models.session import CourseSession, ProgressRecord

logger = structlog.get_logger()

SESSION_COLUMNS = "id,module_id,session_number,title,subtitle"
PROGRESS_COLUMNS = "session_id,completion_percentage,completed_at,last_accessed_at,quiz_score"
ACTIVITY_COLUMNS = (
    "session_id,completion_percentage,last_accessed_at,"
    "sessions!inner(title,module_id,session_number)"
)
CONTINUE_COLUMNS = "module_id,session_id,last_section,last_subsection,completion_percentage"


class BackendError(Exception):
    """Raised when a Supabase request fails or returns unusable data."""


class AuthError(BackendError):
    """Raised when Supabase rejects a sign-in."""


def _parse_rows(model: type[BaseModel], rows: list[dict[str, Any]], table: str) -> list[Any]:
    try:
        return [model.model_validate(row) for row in rows]
    except ValidationError as e:
        raise BackendError(f"Malformed {table} row: {e.error_count()} validation error(s)") from e


def _json_body(response: httpx.Response, what: str) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise BackendError(f"{what} returned a non-JSON body") from e


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if isinstance(body, dict):
        for key in ("error_description", "msg", "message", "error"):
            if body.get(key):
                return str(body[key])
    return f"HTTP {response.status_code}"


class SupabaseClient:
    """Thin async client for one Supabase project, scoped to one user token.

    Args:
        url: Project URL, e.g. ``https://<ref>.supabase.co``.
        anon_key: Public anon API key.
        access_token: The signed-in user's JWT, if any.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport (used by tests).
    """

    def __init__(
        self,
        url: str,
        anon_key: str,
        access_token: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url.rstrip("/")
        self.anon_key = anon_key
        self.access_token = access_token
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {self.access_token or self.anon_key}",
        }

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        try:
            async with httpx.AsyncClient(
                base_url=self.url, timeout=self.timeout, transport=self._transport
            ) as client:
                return await client.request(
                    method, path, params=params, json=json, headers=self._headers()
                )
        except httpx.HTTPError as e:
            raise BackendError(f"{method} {path} failed: {e}") from e

    async def _select(self, table: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        response = await self._request("GET", f"/rest/v1/{table}", params=params)
        if response.status_code != 200:
            raise BackendError(
                f"Query on {table} failed: {_error_message(response)}"
            )
        rows = _json_body(response, f"Query on {table}")
        if not isinstance(rows, list):
            raise BackendError(f"Query on {table} returned a non-list body")
        return rows

    async def get_current_user_id(self) -> str | None:
        """Return the id of the user owning the access token, or None."""
        if not self.access_token:
            return None
        response = await self._request("GET", "/auth/v1/user")
        if response.status_code in (401, 403):
            logger.info("supabase_user_not_authenticated", status=response.status_code)
            return None
        if response.status_code != 200:
            raise BackendError(f"User lookup failed: {_error_message(response)}")
        user = _json_body(response, "User lookup")
        if not isinstance(user, dict):
            raise BackendError("User lookup returned a non-object body")
        return user.get("id")

    async def list_sessions(self) -> list[CourseSession]:
        """Fetch the full session catalogue."""
        rows = await self._select("sessions", {"select": SESSION_COLUMNS})
        return _parse_rows(CourseSession, rows, "sessions")

    async def list_progress(self, user_id: str) -> list[ProgressRecord]:
        """Fetch all progress records for a user."""
        rows = await self._select(
            "user_progress",
            {"select": PROGRESS_COLUMNS, "user_id": f"eq.{user_id}"},
        )
        return _parse_rows(ProgressRecord, rows, "user_progress")

    async def list_recent_activity(self, user_id: str, limit: int = 5) -> list[RecentActivity]:
        """Fetch the most recently accessed progress rows joined with session info."""
        rows = await self._select(
            "user_progress",
            {
                "select": ACTIVITY_COLUMNS,
                "user_id": f"eq.{user_id}",
                "order": "last_accessed_at.desc",
                "limit": limit,
            },
        )
        return _parse_rows(RecentActivity, rows, "user_progress")

    async def get_last_accessed_session(self, user_id: str) -> ContinueSession | None:
        """Fetch the single most recently accessed session, if any."""
        rows = await self._select(
            "user_session_progress",
            {
                "select": CONTINUE_COLUMNS,
                "user_id": f"eq.{user_id}",
                "order": "last_accessed.desc",
                "limit": 1,
            },
        )
        if not rows:
            return None
        return _parse_rows(ContinueSession, rows[:1], "user_session_progress")[0]

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        """Exchange email and password for a user session.

        Raises:
            AuthError: Credentials rejected or response unusable.
            BackendError: Supabase unreachable or failing.
        """
        response = await self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        if response.status_code in (400, 401, 403, 422):
            raise AuthError(_error_message(response))
        if response.status_code != 200:
            raise BackendError(f"Sign-in failed: {_error_message(response)}")
        try:
            return AuthSession.model_validate(response.json())
        except (ValidationError, ValueError) as e:
            raise AuthError("Invalid response") from e
