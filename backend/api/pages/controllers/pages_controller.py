"""Pages controller — admin session login and logout."""

from fastapi import APIRouter, HTTPException
from fastapi.responses import RedirectResponse

import config
from auth import COOKIE_MAX_AGE, COOKIE_NAME, check_secret, create_session_cookie

router = APIRouter(tags=["Pages"])


@router.get("/login")
async def login(auth: str = ""):
    """Exchange ``?auth=<secret>`` for a session cookie and drop the secret from the URL."""
    if not check_secret(auth):
        raise HTTPException(status_code=401, detail="Unauthorized")

    response = RedirectResponse(url=f"{config.BASE_PATH}/api/files", status_code=302)
    response.set_cookie(
        COOKIE_NAME,
        create_session_cookie(),
        httponly=True,
        secure=config.BASE_URL.startswith("https"),
        samesite="lax",
        max_age=COOKIE_MAX_AGE,
        path=config.BASE_PATH or "/",
    )
    return response


@router.get("/logout")
async def logout():
    response = RedirectResponse(url=f"{config.BASE_PATH}/health", status_code=302)
    response.delete_cookie(COOKIE_NAME, path=config.BASE_PATH or "/")
    return response
