"""
Admin Portal - server-side authentication
JWT-based login against the admins collection.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from datetime import datetime, timedelta, timezone
import logging
import jwt

from app.config import Settings, get_settings
from app.database import get_db
from app.models import Admin
from app.schemas import AdminLoginRequest, AdminLoginResponse, AdminVerifyResponse
from app.security import verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin-auth"])

JWT_ALGORITHM = "HS256"


def create_jwt_token(payload: dict, settings: Settings) -> str:
    """Create a JWT token with expiry."""
    data = payload.copy()
    data["exp"] = datetime.now(timezone.utc) + timedelta(hours=settings.JWT_EXPIRY_HOURS)
    data["iat"] = datetime.now(timezone.utc)
    return jwt.encode(data, settings.JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def verify_jwt_token(token: str, settings: Settings):
    """Verify and decode a JWT token. Returns payload or None."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
        return payload
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None


@router.post("/login", response_model=AdminLoginResponse)
def admin_login(
    req: AdminLoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Authenticate an admin by username and password.
    Returns a JWT token together with the admin's role.
    """
    admin = db.query(Admin).filter(Admin.username == req.username).first()
    if not admin or not verify_password(req.password, admin.password_hash):
        logger.warning("Failed admin login for %s", req.username)
        raise HTTPException(status_code=401, detail="Invalid username or password")

    token = create_jwt_token({"sub": admin.username, "role": admin.role}, settings)

    return AdminLoginResponse(
        token=token,
        role=admin.role,
        username=admin.username,
        full_name=admin.full_name,
    )


@router.get("/verify", response_model=AdminVerifyResponse)
def admin_verify_get(token: str = "", settings: Settings = Depends(get_settings)):
    """
    GET endpoint to verify JWT token validity.
    Used by frontend on page load to check if session is still active.
    """
    if not token:
        raise HTTPException(status_code=401, detail="Token required")

    payload = verify_jwt_token(token, settings)
    if payload is None:
        raise HTTPException(status_code=401, detail="Token expired or invalid")

    return AdminVerifyResponse(
        valid=True,
        role=payload.get("role"),
        username=payload.get("sub"),
    )
