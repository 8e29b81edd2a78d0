"""Password hashing, server-held sessions and the role gate.

The browser only ever holds an opaque session key in a cookie. The session
itself maps that key to a user id; the user's role is looked up again on
every protected request so role changes apply immediately.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from fastapi import Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash, generate_password_hash

from . import config, models
from .db import get_db
from .statuses import UserRole

logger = logging.getLogger(__name__)


def get_password_hash(password: str) -> str:
    return generate_password_hash(password, method="scrypt", salt_length=16)


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        return False
    return check_password_hash(password_hash, password)


class SessionStore:
    """In-memory session store. Sessions are lost on restart."""

    def __init__(self, ttl_hours: int = 24):
        self._sessions: Dict[str, dict] = {}
        self._ttl = timedelta(hours=ttl_hours)

    def create(self, user_id: int) -> str:
        self.cleanup_expired()
        session_id = secrets.token_urlsafe(32)
        self._sessions[session_id] = {
            "user_id": user_id,
            "expires_at": datetime.now(timezone.utc) + self._ttl,
        }
        return session_id

    def get(self, session_id: Optional[str]) -> Optional[dict]:
        if not session_id:
            return None
        session = self._sessions.get(session_id)
        if not session:
            return None
        if session["expires_at"] < datetime.now(timezone.utc):
            self.delete(session_id)
            return None
        return {"user_id": session["user_id"]}

    def delete(self, session_id: Optional[str]) -> None:
        if session_id:
            self._sessions.pop(session_id, None)

    def cleanup_expired(self) -> int:
        """Drop every expired session and return how many were removed."""
        now = datetime.now(timezone.utc)
        expired = [
            sid for sid, session in self._sessions.items() if session["expires_at"] < now
        ]
        for sid in expired:
            del self._sessions[sid]
        return len(expired)

    def clear(self) -> None:
        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)


sessions = SessionStore(ttl_hours=config.get_session_ttl_hours())


def start_session(response: Response, user: models.User) -> str:
    session_id = sessions.create(user.id)
    response.set_cookie(
        key=config.get_session_cookie_name(),
        value=session_id,
        max_age=config.get_session_ttl_hours() * 3600,
        httponly=True,
        samesite="lax",
        secure=config.session_cookie_secure(),
    )
    return session_id


def end_session(request: Request, response: Response) -> None:
    cookie_name = config.get_session_cookie_name()
    sessions.delete(request.cookies.get(cookie_name))
    response.delete_cookie(cookie_name)


def get_optional_user(
    request: Request, db: Session = Depends(get_db)
) -> Optional[models.User]:
    session = sessions.get(request.cookies.get(config.get_session_cookie_name()))
    if not session:
        return None
    return db.get(models.User, session["user_id"])


def get_current_user(
    user: Optional[models.User] = Depends(get_optional_user),
) -> models.User:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated"
        )
    return user


def require_role(role: UserRole):
    def checker(user: models.User = Depends(get_current_user)) -> models.User:
        if user.role != role.value:
            logger.info(
                "User %s with role %s denied, %s required", user.id, user.role, role.value
            )
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
        return user

    return checker


require_kitchen_staff = require_role(UserRole.KITCHEN_STAFF)
