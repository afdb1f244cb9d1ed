import secrets
from datetime import datetime, timezone, timedelta
from functools import lru_cache
from typing import Optional
from jose import jwt, JWTError
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from passlib.context import CryptContext
from app.core.config import settings
from app.core.dependencies import get_local_cache
from app.core.local_cache import LocalCache
from app.schemas.auth import AdminSession

JWT_ALGORITHM = "HS256"

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")


pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except Exception:
        return False

@lru_cache(maxsize=1)
def _admin_password_hash() -> str:
    return hash_password(settings.ADMIN_PASSWORD)

def authenticate_admin(username: str, password: str) -> bool:
    if not secrets.compare_digest(username or "", settings.ADMIN_USERNAME):
        return False
    return verify_password(password or "", _admin_password_hash())

def create_access_token(subject: str, session_id: str, expires_minutes: int | None = None) -> str:
    expires = expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES
    expire_dt = datetime.now(timezone.utc) + timedelta(minutes=expires)
    to_encode = {"sub": str(subject), "sid": session_id, "exp": expire_dt}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=JWT_ALGORITHM)


async def open_session(request: Request) -> AdminSession:
    session = AdminSession(id="admin", username="Administrator", session_id=secrets.token_hex(16))
    request.app.state.admin_session = session
    await get_local_cache(request).set_json(settings.SESSION_CACHE_KEY, session.model_dump())
    return session

async def close_session(request: Request) -> None:
    request.app.state.admin_session = None
    await get_local_cache(request).delete(settings.SESSION_CACHE_KEY)

async def restore_session(cache: LocalCache) -> Optional[AdminSession]:
    record = await cache.get_json(settings.SESSION_CACHE_KEY)
    if not record:
        return None
    try:
        return AdminSession.model_validate(record)
    except ValueError:
        return None

async def get_current_admin(request: Request, token: str = Depends(oauth2_scheme)) -> AdminSession:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[JWT_ALGORITHM])
        session_id = payload.get("sid")
        if session_id is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    except JWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    session: Optional[AdminSession] = getattr(request.app.state, "admin_session", None)
    if session is None or not secrets.compare_digest(session.session_id, session_id):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Session expired")
    return session
