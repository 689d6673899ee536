"""Credential resolution and caching."""

from ecs_local.core.credentials.cache import (
    CachedCredential,
    CredentialCacheProvider,
    forget_profile,
)
from ecs_local.core.credentials.resolver import (
    CredentialKind,
    CredentialResolver,
    ResolvedCredential,
    SessionCredentialResolver,
    classify_provider,
)
from ecs_local.core.credentials.session import build_cache_provider, create_session

__all__ = [
    "CachedCredential",
    "CredentialCacheProvider",
    "CredentialKind",
    "CredentialResolver",
    "ResolvedCredential",
    "SessionCredentialResolver",
    "build_cache_provider",
    "classify_provider",
    "create_session",
    "forget_profile",
]
