from typing import Dict, Optional

from fastapi import Depends, HTTPException, Request, Response
from sqlmodel import Session

from bookswap.auth.providers import IdentityProvider
from bookswap.auth.resolver import ResolvedSession, SessionResolver
from bookswap.database import get_session


def get_session_resolver(request: Request) -> SessionResolver:
    return request.app.state.session_resolver


def get_identity_providers(request: Request) -> Dict[str, IdentityProvider]:
    return request.app.state.identity_providers


def get_current_session(
    request: Request,
    response: Response,
    session: Session = Depends(get_session),
    resolver: SessionResolver = Depends(get_session_resolver),
) -> Optional[ResolvedSession]:
    return resolver.resolve(request, response, session)


def require_session(current: Optional[ResolvedSession] = Depends(get_current_session)) -> ResolvedSession:
    """Reject protected operations for callers without a resolved session (401)."""
    if current is None:
        raise HTTPException(status_code=401, detail="UNAUTHORIZED: sign in required")
    return current
