import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.security import OAuth2PasswordRequestForm
from app.schemas.auth import AdminSession, TokenOut
from app.core.security import (
    authenticate_admin,
    close_session,
    create_access_token,
    get_current_admin,
    open_session,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenOut)
async def login(request: Request, form_data: OAuth2PasswordRequestForm = Depends()):
    if not authenticate_admin(form_data.username, form_data.password):
        logger.warning(f"Rejected admin login for {form_data.username!r}")
        raise HTTPException(status_code=400, detail="Invalid admin credentials")

    session = await open_session(request)
    logger.info("Admin session opened")
    token = create_access_token(session.id, session.session_id)
    return {"access_token": token}


@router.post("/logout")
async def logout(request: Request, admin: AdminSession = Depends(get_current_admin)):
    await close_session(request)
    logger.info("Admin session closed")
    return {"ok": True}


@router.get("/me", response_model=AdminSession)
async def me(admin: AdminSession = Depends(get_current_admin)):
    return admin
