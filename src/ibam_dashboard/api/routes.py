"""REST API routes for login and the progress dashboard."""

import structlog
from fastapi import APIRouter, HTTPException, Request, Response
from fastapi.responses import JSONResponse

from ibam_dashboard.backend.client import AuthError, BackendError, SupabaseClient
from ibam_dashboard.config import Settings, get_curriculum, get_settings
from ibam_dashboard.dashboard.loader import DashboardLoader
from ibam_dashboard.models.auth import LoginRequest, LoginResponse, SessionTokens
from ibam_dashboard.progress.unlock import build_module_cards

logger = structlog.get_logger()
router = APIRouter(prefix="/api")


def _backend(settings: Settings, access_token: str | None = None) -> SupabaseClient:
    return SupabaseClient(
        settings.supabase_url,
        settings.supabase_anon_key,
        access_token=access_token,
        timeout=settings.request_timeout_seconds,
    )


def get_access_token(request: Request, settings: Settings) -> str | None:
    """Bearer token from the Authorization header, else the session cookie."""
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() == "bearer" and token:
        return token.strip()
    return request.cookies.get(settings.session_cookie_name)


def _clear_login_cookies(response: Response, settings: Settings) -> None:
    response.delete_cookie(settings.auth_cookie_name, path="/")
    response.delete_cookie(settings.session_cookie_name, path="/")


def _login_failed(status_code: int, detail: str, settings: Settings) -> JSONResponse:
    response = JSONResponse({"detail": detail}, status_code=status_code)
    _clear_login_cookies(response, settings)
    return response


@router.post("/auth/login", response_model=LoginResponse)
async def login(body: LoginRequest, response: Response):
    """Sign in with email and password and set the login cookies.

    Cookies from any previous login are cleared whether or not the sign-in
    succeeds.
    """
    settings = get_settings()
    _clear_login_cookies(response, settings)

    try:
        auth = await _backend(settings).sign_in_with_password(body.email, body.password)
    except AuthError as e:
        logger.info("login_rejected", reason=str(e))
        return _login_failed(401, f"Login failed: {e}", settings)
    except BackendError as e:
        logger.error("login_backend_error", error=str(e))
        return _login_failed(502, f"Login failed: {e}", settings)

    response.set_cookie(
        settings.auth_cookie_name,
        auth.user.id,
        max_age=settings.auth_cookie_max_age_seconds,
        path="/",
        secure=True,
        samesite="strict",
    )
    response.set_cookie(
        settings.session_cookie_name,
        auth.access_token,
        max_age=settings.auth_cookie_max_age_seconds,
        path="/",
        secure=True,
        httponly=True,
        samesite="strict",
    )
    logger.info("login_succeeded", user_id=auth.user.id)
    return LoginResponse(
        user=auth.user,
        session=SessionTokens(
            access_token=auth.access_token,
            refresh_token=auth.refresh_token,
            expires_at=auth.expires_at,
        ),
    )


@router.get("/dashboard")
async def get_dashboard(request: Request) -> dict:
    """Load the signed-in user's dashboard."""
    settings = get_settings()
    curriculum = get_curriculum()
    loader = DashboardLoader(
        _backend(settings, get_access_token(request, settings)),
        curriculum,
        recent_activity_limit=settings.recent_activity_limit,
    )
    snapshot = await loader.load()
    if not snapshot.authenticated:
        raise HTTPException(status_code=401, detail="Not authenticated")

    data = snapshot.model_dump(mode="json")
    data["modules"] = [
        card.model_dump(mode="json")
        for card in build_module_cards(curriculum, snapshot.module_progress)
    ]
    return data


@router.get("/curriculum")
async def get_curriculum_catalogue() -> dict:
    """Return the configured module catalogue."""
    return get_curriculum().model_dump()


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}
