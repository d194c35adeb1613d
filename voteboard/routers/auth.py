from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse, RedirectResponse

from voteboard.domain.policy import with_permissions
from voteboard.routers.deps import get_current_user, get_policy, get_store
from voteboard.services.session_service import (
    SESSION_COOKIE_NAME,
    clear_session_cookie,
    delete_session,
    issue_session,
    set_session_cookie,
)
from voteboard.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])


def _settings(request: Request):
    return request.app.state.settings


def _wants_json(request: Request) -> bool:
    accept = request.headers.get("accept") or ""
    return "application/json" in accept or request.headers.get("x-requested-with") == "XMLHttpRequest"


@router.get("/discord")
def discord_login(request: Request):
    settings = _settings(request)
    # Only the mock flow exists; the real OAuth exchange is not wired up.
    if not settings.dev_mode:
        raise HTTPException(404, "Not found")
    user = UserService(get_store(request)).login_mock_user()
    token = issue_session(user["discordId"])
    if _wants_json(request):
        response = JSONResponse({"success": True, "message": "Dev login successful", "user": user})
    else:
        response = RedirectResponse(settings.frontend_url, status_code=302)
    set_session_cookie(response, token)
    return response


@router.get("/user")
def current_user(request: Request):
    if not _settings(request).dev_mode:
        raise HTTPException(401, "Authentication not implemented in production yet")
    user = get_current_user(request)
    if not user:
        raise HTTPException(401, "Not authenticated")
    return with_permissions(user, get_policy(request))


@router.get("/logout")
def logout(request: Request):
    delete_session(request.cookies.get(SESSION_COOKIE_NAME))
    response = JSONResponse({"message": "Logged out successfully"})
    clear_session_cookie(response)
    return response
