"""Sign-in, sign-out and current-session endpoints."""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request, Response
from sqlmodel import Session

from bookswap.auth.dependencies import get_current_session, get_identity_providers, get_session_resolver
from bookswap.auth.providers import AuthenticationError, IdentityProvider
from bookswap.auth.resolver import ResolvedSession, SessionResolver
from bookswap.database import get_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/signin/{provider_id}", response_model=ResolvedSession)
def sign_in(
    provider_id: str,
    response: Response,
    credentials: Dict[str, Any] = Body(default_factory=dict),
    session: Session = Depends(get_session),
    resolver: SessionResolver = Depends(get_session_resolver),
    providers: Dict[str, IdentityProvider] = Depends(get_identity_providers),
):
    """
    Verify provider credentials and start a session.

    The session token is set as an HTTP-only cookie.
    """
    provider = providers.get(provider_id)
    if provider is None:
        raise HTTPException(status_code=404, detail=f"Identity provider '{provider_id}' is not enabled")

    try:
        identity = provider.authenticate(credentials)
        return resolver.sign_in(session, identity, response)
    except AuthenticationError as e:
        logger.warning(f"Sign-in with {provider_id} failed: {e}")
        raise HTTPException(status_code=401, detail=str(e))


@router.get("/session", response_model=Optional[ResolvedSession])
def get_auth_session(current: Optional[ResolvedSession] = Depends(get_current_session)):
    """Current session, or null when signed out."""
    return current


@router.post("/signout", status_code=204, response_class=Response)
def sign_out(
    request: Request,
    response: Response,
    session: Session = Depends(get_session),
    resolver: SessionResolver = Depends(get_session_resolver),
):
    resolver.sign_out(request, response, session)
