from bookswap.auth.providers import (
    AuthenticationError,
    ExternalIdentity,
    GitHubIdentityProvider,
    IdentityProvider,
    StubIdentityProvider,
    build_identity_providers,
)
from bookswap.auth.resolver import ResolvedSession, SessionResolver, SessionUser

__all__ = [
    "AuthenticationError",
    "ExternalIdentity",
    "IdentityProvider",
    "GitHubIdentityProvider",
    "StubIdentityProvider",
    "build_identity_providers",
    "ResolvedSession",
    "SessionResolver",
    "SessionUser",
]
