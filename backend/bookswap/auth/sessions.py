"""Server-side session rows and account linking."""

import logging
import secrets
from datetime import timedelta
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from bookswap.auth.providers import AuthenticationError, ExternalIdentity
from bookswap.models.auth_session import AuthSession
from bookswap.models.timestamps import as_utc, utcnow
from bookswap.models.user import Account, User

logger = logging.getLogger(__name__)


class SessionStore:
    def __init__(self, session: Session, max_age: timedelta, update_age: timedelta):
        self.session = session
        self.max_age = max_age
        self.update_age = update_age

    def link_account(self, identity: ExternalIdentity) -> User:
        """
        Return the local user for an external identity, creating it on first sign-in.

        An existing account keeps its user; the stored profile is not refreshed.
        A new external account whose email already belongs to another user is
        refused rather than silently linked. If a concurrent sign-in links the
        same account first, its user is returned.
        """
        user = self._linked_user(identity)
        if user is not None:
            return user

        if identity.email:
            existing = self.session.exec(select(User).where(User.email == identity.email)).first()
            if existing:
                logger.warning(f"Refused to link {identity.provider} account to existing user {existing.id} by email")
                raise AuthenticationError("Email is already associated with another account")

        user = User(name=identity.name, email=identity.email, image=identity.image)
        try:
            self.session.add(user)
            self.session.flush()
            self.session.add(
                Account(user_id=user.id, provider=identity.provider, provider_account_id=identity.account_id)
            )
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            linked = self._linked_user(identity)
            if linked is None:
                logger.warning(f"Could not link {identity.provider} account: {e.orig}")
                raise AuthenticationError("Could not link account; try signing in again") from e
            logger.info(f"{identity.provider} account was linked concurrently to user {linked.id}")
            return linked

        self.session.refresh(user)
        logger.info(f"Created user {user.id} for {identity.provider} account")
        return user

    def _linked_user(self, identity: ExternalIdentity) -> Optional[User]:
        account = self.session.exec(
            select(Account).where(
                Account.provider == identity.provider,
                Account.provider_account_id == identity.account_id,
            )
        ).first()
        if account is None:
            return None
        user = self.session.get(User, account.user_id)
        if user is None:
            logger.warning(f"{identity.provider} account {account.id} points at missing user {account.user_id}")
            raise AuthenticationError("Linked user no longer exists")
        return user

    def create(self, user: User) -> AuthSession:
        row = AuthSession(
            session_token=secrets.token_urlsafe(32),
            user_id=user.id,
            expires=utcnow() + self.max_age,
        )
        self.session.add(row)
        self.session.commit()
        self.session.refresh(row)
        return row

    def get(self, token: str) -> Optional[AuthSession]:
        if not token:
            return None
        return self.session.exec(select(AuthSession).where(AuthSession.session_token == token)).first()

    def touch(self, row: AuthSession) -> bool:
        """Push expiry out to now + max_age once update_age has passed since the last push."""
        now = utcnow()
        due_at = as_utc(row.expires) - self.max_age + self.update_age
        if due_at > now:
            return False
        row.expires = now + self.max_age
        self.session.add(row)
        self.session.commit()
        self.session.refresh(row)
        return True

    def delete(self, token: str) -> bool:
        row = self.get(token)
        if row is None:
            return False
        self.session.delete(row)
        self.session.commit()
        return True
