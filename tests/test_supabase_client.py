"""Tests for the Supabase REST client."""

import httpx
import pytest

from ibam_dashboard.backend.client import AuthError, BackendError, SupabaseClient

URL = "https://project.supabase.co"
ANON_KEY = "anon-key"


def make_client(handler, access_token: str | None = "user-jwt") -> SupabaseClient:
    return SupabaseClient(
        URL, ANON_KEY, access_token=access_token, transport=httpx.MockTransport(handler)
    )


class TestCurrentUser:
    async def test_returns_user_id(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["auth"] = request.headers["Authorization"]
            seen["apikey"] = request.headers["apikey"]
            return httpx.Response(200, json={"id": "user-123", "email": "a@b.c"})

        user_id = await make_client(handler).get_current_user_id()

        assert user_id == "user-123"
        assert seen == {
            "path": "/auth/v1/user",
            "auth": "Bearer user-jwt",
            "apikey": ANON_KEY,
        }

    async def test_no_token_skips_request(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        assert await make_client(handler, access_token=None).get_current_user_id() is None

    async def test_expired_token_is_unauthenticated(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"msg": "invalid JWT"})

        assert await make_client(handler).get_current_user_id() is None

    async def test_server_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"message": "down"})

        with pytest.raises(BackendError):
            await make_client(handler).get_current_user_id()


class TestQueries:
    async def test_list_sessions(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/rest/v1/sessions"
            assert request.url.params["select"] == "id,module_id,session_number,title,subtitle"
            return httpx.Response(200, json=[
                {"id": 1, "module_id": 1, "session_number": 1,
                 "title": "Intro", "subtitle": "Start here"},
                {"id": 5, "module_id": 2, "session_number": 1,
                 "title": "Reasons for Failure", "subtitle": None},
            ])

        sessions = await make_client(handler).list_sessions()

        assert [s.id for s in sessions] == [1, 5]
        assert sessions[1].module_id == 2

    async def test_list_progress_filters_by_user(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/rest/v1/user_progress"
            assert request.url.params["user_id"] == "eq.user-123"
            return httpx.Response(200, json=[
                {"session_id": 1, "completion_percentage": 100,
                 "completed_at": "2025-06-20T10:00:00Z",
                 "last_accessed_at": "2025-06-20T10:00:00Z", "quiz_score": 90},
            ])

        records = await make_client(handler).list_progress("user-123")

        assert len(records) == 1
        assert records[0].is_complete
        assert records[0].quiz_score == 90

    async def test_recent_activity_query(self):
        def handler(request: httpx.Request) -> httpx.Response:
            params = request.url.params
            assert params["order"] == "last_accessed_at.desc"
            assert params["limit"] == "5"
            assert "sessions!inner(title,module_id,session_number)" in params["select"]
            return httpx.Response(200, json=[
                {"session_id": 26, "completion_percentage": 75,
                 "last_accessed_at": "2025-06-27T18:30:00Z",
                 "sessions": {"title": "Reasons for Success", "module_id": 2,
                              "session_number": 2}},
            ])

        activity = await make_client(handler).list_recent_activity("user-123")

        assert activity[0].session.title == "Reasons for Success"
        assert activity[0].session.module_id == 2

    async def test_last_accessed_session(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/rest/v1/user_session_progress"
            assert request.url.params["order"] == "last_accessed.desc"
            assert request.url.params["limit"] == "1"
            return httpx.Response(200, json=[
                {"module_id": 2, "session_id": 6, "last_section": "quiz",
                 "last_subsection": None, "completion_percentage": 60},
            ])

        result = await make_client(handler).get_last_accessed_session("user-123")

        assert result.module_id == 2
        assert result.last_section == "quiz"

    async def test_last_accessed_session_absent(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[])

        assert await make_client(handler).get_last_accessed_session("user-123") is None

    async def test_query_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"message": "relation does not exist"})

        with pytest.raises(BackendError, match="relation does not exist"):
            await make_client(handler).list_sessions()

    async def test_malformed_row_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[
                {"session_id": 1, "completion_percentage": 250,
                 "last_accessed_at": "2025-06-20T10:00:00Z"},
            ])

        with pytest.raises(BackendError):
            await make_client(handler).list_progress("user-123")

    async def test_non_json_body_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>maintenance</html>")

        with pytest.raises(BackendError, match="non-JSON"):
            await make_client(handler).list_sessions()

    async def test_non_json_user_body_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>maintenance</html>")

        with pytest.raises(BackendError, match="non-JSON"):
            await make_client(handler).get_current_user_id()

    async def test_transport_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        with pytest.raises(BackendError):
            await make_client(handler).list_sessions()


class TestSignIn:
    async def test_password_grant(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "POST"
            assert request.url.path == "/auth/v1/token"
            assert request.url.params["grant_type"] == "password"
            assert request.headers["Authorization"] == f"Bearer {ANON_KEY}"
            return httpx.Response(200, json={
                "access_token": "jwt",
                "refresh_token": "refresh",
                "expires_at": 1751040000,
                "token_type": "bearer",
                "user": {"id": "user-123", "email": "a@b.c",
                         "created_at": "2025-01-01T00:00:00Z"},
            })

        session = await make_client(handler, access_token=None).sign_in_with_password(
            "a@b.c", "secret"
        )

        assert session.user.id == "user-123"
        assert session.access_token == "jwt"
        assert session.expires_at == 1751040000

    async def test_rejected_credentials(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={
                "error": "invalid_grant",
                "error_description": "Invalid login credentials",
            })

        with pytest.raises(AuthError, match="Invalid login credentials"):
            await make_client(handler, access_token=None).sign_in_with_password("a@b.c", "x")

    async def test_response_without_session(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"user": {"id": "user-123"}})

        with pytest.raises(AuthError, match="Invalid response"):
            await make_client(handler, access_token=None).sign_in_with_password("a@b.c", "x")
