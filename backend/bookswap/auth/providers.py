"""Identity providers.

An identity provider turns provider-specific sign-in credentials into a
verified external account. Providers do not touch the database; linking the
external account to a local user is done by ``SessionStore``.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from bookswap.config import Settings

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """Raised when credentials cannot be verified by a provider"""

    pass


@dataclass(frozen=True)
class ExternalIdentity:
    provider: str
    account_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    image: Optional[str] = None


class IdentityProvider(ABC):
    id: str

    @abstractmethod
    def authenticate(self, credentials: Dict[str, Any]) -> ExternalIdentity:
        """Verify credentials, or raise AuthenticationError."""


class GitHubIdentityProvider(IdentityProvider):
    """
    GitHub OAuth app sign-in.

    Expects credentials ``{"code": ..., "redirect_uri": ...}`` where ``code``
    is the authorization code GitHub redirected back with.
    """

    id = "github"
    TOKEN_URL = "https://github.com/login/oauth/access_token"
    USER_URL = "https://api.github.com/user"

    def __init__(self, client_id: str, client_secret: str, http: Optional[requests.Session] = None, timeout: float = 10.0):
        self.client_id = client_id
        self.client_secret = client_secret
        self.http = http or requests.Session()
        self.timeout = timeout

    def authenticate(self, credentials: Dict[str, Any]) -> ExternalIdentity:
        code = str(credentials.get("code") or "").strip()
        if not code:
            raise AuthenticationError("GitHub sign-in requires an authorization code")

        token_data = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "code": code,
        }
        if credentials.get("redirect_uri"):
            token_data["redirect_uri"] = credentials["redirect_uri"]

        try:
            token_response = self.http.post(
                self.TOKEN_URL,
                data=token_data,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
            token_response.raise_for_status()
            token_payload = token_response.json()
        except (requests.RequestException, ValueError) as e:
            raise AuthenticationError(f"GitHub token exchange failed: {e}") from e

        access_token = token_payload.get("access_token")
        if not access_token:
            # GitHub answers 200 with {"error": ..., "error_description": ...} for bad codes
            reason = token_payload.get("error_description") or token_payload.get("error") or "no access token returned"
            raise AuthenticationError(f"GitHub token exchange failed: {reason}")

        try:
            user_response = self.http.get(
                self.USER_URL,
                headers={
                    "Authorization": f"Bearer {access_token}",
                    "Accept": "application/vnd.github+json",
                },
                timeout=self.timeout,
            )
            user_response.raise_for_status()
            profile = user_response.json()
        except (requests.RequestException, ValueError) as e:
            raise AuthenticationError(f"GitHub profile lookup failed: {e}") from e

        if profile.get("id") is None:
            raise AuthenticationError("GitHub profile did not include an account id")

        return ExternalIdentity(
            provider=self.id,
            account_id=str(profile["id"]),
            name=profile.get("name") or profile.get("login"),
            email=profile.get("email"),
            image=profile.get("avatar_url"),
        )


class StubIdentityProvider(IdentityProvider):
    """Trusts the caller-supplied account id. For tests and local development only."""

    id = "stub"

    def authenticate(self, credentials: Dict[str, Any]) -> ExternalIdentity:
        account_id = str(credentials.get("account_id") or "").strip()
        if not account_id:
            raise AuthenticationError("Stub sign-in requires an account_id")
        return ExternalIdentity(
            provider=self.id,
            account_id=account_id,
            name=credentials.get("name"),
            email=credentials.get("email"),
            image=credentials.get("image"),
        )


def build_identity_providers(settings: Settings) -> Dict[str, IdentityProvider]:
    """Providers enabled by configuration, keyed by provider id."""
    providers: Dict[str, IdentityProvider] = {}

    if settings.github_client_id and settings.github_client_secret:
        providers[GitHubIdentityProvider.id] = GitHubIdentityProvider(
            settings.github_client_id, settings.github_client_secret
        )
    else:
        logger.warning(
            "GitHub sign-in not configured. Set GITHUB_CLIENT_ID and GITHUB_CLIENT_SECRET to enable it."
        )

    if settings.enable_stub_auth:
        logger.warning("Stub identity provider enabled; do not use in production.")
        providers[StubIdentityProvider.id] = StubIdentityProvider()

    return providers
