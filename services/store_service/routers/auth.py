"""Store auth router: register, login, logout, current principal."""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from libs.auth.dependencies import get_api_user, login_session, logout_session
from libs.auth.models import SessionUser
from libs.db.session import get_async_db
from services.store_service.schemas import (
    LoginRequest,
    PrincipalResponse,
    RegisterRequest,
)
from services.store_service.services import identity
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["auth"])


@router.post(
    "/register",
    response_model=PrincipalResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    payload: RegisterRequest,
    request: Request,
    db: AsyncSession = Depends(get_async_db),
):
    """Create an account and log it in."""
    if not payload.email or not payload.email.strip() or not payload.password:
        raise HTTPException(status_code=400, detail="Missing fields")

    user = await identity.register_user(
        db, email=payload.email, password=payload.password, name=payload.name or ""
    )
    principal = identity.to_principal(user)
    login_session(request, principal)
    return principal


@router.post("/login", response_model=PrincipalResponse)
async def login(
    payload: LoginRequest,
    request: Request,
    db: AsyncSession = Depends(get_async_db),
):
    """Password login. Any failure is the same 401."""
    if not payload.email or not payload.password:
        raise HTTPException(status_code=401, detail=identity.INVALID_CREDENTIALS)

    user = await identity.authenticate(db, email=payload.email, password=payload.password)
    principal = identity.to_principal(user)
    login_session(request, principal)
    return principal


@router.post("/logout")
async def logout(request: Request):
    logout_session(request)
    return RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/me", response_model=PrincipalResponse)
async def me(current_user: SessionUser = Depends(get_api_user)):
    return current_user
