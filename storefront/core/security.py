from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt

from storefront.core.config import settings

# tokens are issued by the managed auth provider; tokenUrl is informational only
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/v1/token")
# optional bearer for endpoints that also accept guests (checkout)
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/v1/token", auto_error=False)


@dataclass
class CurrentUser:
    id: str
    role: str = "customer"
    email: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def create_access_token(subject: str, role: str = "customer", email: Optional[str] = None, expires_delta: Optional[timedelta] = None) -> str:
    """mint a token the way the auth provider does (used by scripts and tests)."""
    to_encode = {
        "sub": subject,
        "role": role,
        "iat": int(datetime.now(tz=timezone.utc).timestamp()),
    }
    if email:
        to_encode["email"] = email
    if settings.AUTH_JWT_AUDIENCE:
        to_encode["aud"] = settings.AUTH_JWT_AUDIENCE
    expire = datetime.now(tz=timezone.utc) + (expires_delta or timedelta(hours=1))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.AUTH_JWT_SECRET, algorithm=settings.AUTH_JWT_ALGORITHM)


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(
            token,
            settings.AUTH_JWT_SECRET,
            algorithms=[settings.AUTH_JWT_ALGORITHM],
            audience=settings.AUTH_JWT_AUDIENCE,
            options={"verify_aud": settings.AUTH_JWT_AUDIENCE is not None},
        )
    except JWTError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from e


def _user_from_payload(payload: dict) -> CurrentUser:
    sub = payload.get("sub")
    if not sub:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload")
    # the provider keeps app roles under app_metadata, older tokens carry a flat claim
    role = (payload.get("app_metadata") or {}).get("role") or payload.get("role") or "customer"
    return CurrentUser(id=str(sub), role=role, email=payload.get("email"))


async def get_current_user(token: str = Depends(oauth2_scheme)) -> CurrentUser:
    return _user_from_payload(decode_token(token))


async def get_optional_user(token: Optional[str] = Depends(optional_oauth2_scheme)) -> Optional[CurrentUser]:
    if not token:
        return None
    return _user_from_payload(decode_token(token))


def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="admin only")
    return user
