"""
Page Endpoints
==============

Minimal page descriptors behind the route gate. The gate has already
redirected anyone who should not see a page by the time these run.
"""

from typing import Optional

from fastapi import APIRouter, Query

from deskflow.config import settings
from deskflow.dependencies import CurrentSessionOptional

router = APIRouter()


@router.get("/")
async def home(session: CurrentSessionOptional) -> dict:
    """Home page; only reachable with a session cookie."""
    return {
        "page": "home",
        "account": session.account.to_summary_dict() if session else None,
        "dashboard": "/api/v1/dashboard",
    }


@router.get("/login")
async def login_page(next_path: Optional[str] = Query(None, alias="from")) -> dict:
    return {
        "page": "login",
        "from": next_path,
        "action": "/api/v1/auth/login",
        "register": settings.REGISTER_PATH,
    }


@router.get("/register")
async def register_page() -> dict:
    return {
        "page": "register",
        "action": "/api/v1/auth/register",
        "login": settings.LOGIN_PATH,
    }
