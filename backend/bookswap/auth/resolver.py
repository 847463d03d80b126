"""
Session Resolver

Resolves the caller's session from an inbound request. The token is read
from the session cookie, or from an ``Authorization: Bearer`` header for
non-browser clients, and looked up in the server-side session table.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Request, Response
from pydantic import BaseModel
from sqlmodel import Session

from bookswap.auth.providers import ExternalIdentity
from bookswap.auth.sessions import SessionStore
from bookswap.config import Settings
from bookswap.models.auth_session import AuthSession
from bookswap.models.timestamps import as_utc, utcnow
from bookswap.models.user import User

logger = logging.getLogger(__name__)


class SessionUser(BaseModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    image: Optional[str] = None
    user_name: Optional[str] = None


class ResolvedSession(BaseModel):
    user: SessionUser
    expires: datetime


def shape_session(row: AuthSession, user: User) -> ResolvedSession:
    """Expose the stable user id and the display name as user_name alongside the profile fields."""
    return ResolvedSession(
        user=SessionUser(
            id=user.id,
            name=user.name,
            email=user.email,
            image=user.image,
            user_name=user.name,
        ),
        expires=as_utc(row.expires),
    )


class SessionResolver:
    def __init__(
        self,
        cookie_name: str = "bookswap.session-token",
        max_age: timedelta = timedelta(days=30),
        update_age: timedelta = timedelta(hours=24),
        secure_cookie: bool = False,
    ):
        self.cookie_name = cookie_name
        self.max_age = max_age
        self.update_age = update_age
        self.secure_cookie = secure_cookie

    @classmethod
    def from_settings(cls, settings: Settings) -> "SessionResolver":
        return cls(
            cookie_name=settings.session_cookie_name,
            max_age=settings.session_max_age,
            update_age=settings.session_update_age,
            secure_cookie=settings.session_cookie_secure,
        )

    def store(self, db: Session) -> SessionStore:
        return SessionStore(db, max_age=self.max_age, update_age=self.update_age)

    def read_token(self, request: Request) -> Optional[str]:
        token = request.cookies.get(self.cookie_name)
        if token:
            return token
        scheme, _, credentials = request.headers.get("authorization", "").partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
        return None

    def resolve(self, request: Request, response: Response, db: Session) -> Optional[ResolvedSession]:
        """Return the caller's session, or None when unauthenticated or expired."""
        token = self.read_token(request)
        if not token:
            return None

        store = self.store(db)
        row = store.get(token)
        if row is None:
            return None

        if as_utc(row.expires) <= utcnow():
            logger.info(f"Session for user {row.user_id} expired; removing")
            store.delete(token)
            return None

        user = db.get(User, row.user_id)
        if user is None:
            return None

        if store.touch(row):
            self._set_cookie(response, token)

        return shape_session(row, user)

    def sign_in(self, db: Session, identity: ExternalIdentity, response: Response) -> ResolvedSession:
        store = self.store(db)
        user = store.link_account(identity)
        row = store.create(user)
        self._set_cookie(response, row.session_token)

        logger.info(f"User {user.id} signed in with {identity.provider}")
        return shape_session(row, user)

    def sign_out(self, request: Request, response: Response, db: Session) -> None:
        token = self.read_token(request)
        if token and self.store(db).delete(token):
            logger.info("Session signed out")
        response.delete_cookie(self.cookie_name, path="/")

    def _set_cookie(self, response: Response, token: str) -> None:
        response.set_cookie(
            key=self.cookie_name,
            value=token,
            max_age=int(self.max_age.total_seconds()),
            path="/",
            httponly=True,
            samesite="lax",
            secure=self.secure_cookie,
        )
