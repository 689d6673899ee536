"""AWS session helpers backed by the credential cache."""

from datetime import UTC, datetime, timedelta
from typing import Any

import boto3
import botocore.session
from botocore.credentials import CredentialProvider, DeferredRefreshableCredentials
from botocore.credentials import CredentialResolver as BotocoreCredentialResolver

from ecs_local.config.settings import EcsLocalSettings, LaunchConfig
from ecs_local.core.credentials.cache import CredentialCacheProvider
from ecs_local.core.credentials.resolver import CredentialResolver, SessionCredentialResolver

# Lifetime handed to botocore for credentials without an expiry of their own.
STATIC_REFRESH_INTERVAL = timedelta(hours=1)
# botocore rejects refreshed credentials with less than ten minutes left.
CACHE_EXPIRY_MARGIN = timedelta(minutes=11)


class CachedCredentialSource(CredentialProvider):
    """botocore credential provider that defers to a CredentialResolver."""

    METHOD = "ecs-local-cache"
    CANONICAL_NAME = "EcsLocalCache"

    def __init__(self, resolver: CredentialResolver) -> None:
        super().__init__()
        self._resolver = resolver

    def load(self) -> DeferredRefreshableCredentials:
        return DeferredRefreshableCredentials(
            refresh_using=self.fetch_metadata,
            method=self.METHOD,
        )

    def fetch_metadata(self) -> dict[str, Any]:
        """Resolve credentials in the shape botocore refreshes from."""
        credential = self._resolver.resolve()
        expires_at = credential.expires_at or datetime.now(UTC) + STATIC_REFRESH_INTERVAL
        return {
            "access_key": credential.access_key_id,
            "secret_key": credential.secret_access_key,
            "token": credential.session_token,
            "expiry_time": expires_at.isoformat(),
        }


def build_cache_provider(
    config: LaunchConfig, settings: EcsLocalSettings
) -> CredentialCacheProvider:
    """Wrap the profile's credential chain with the on-disk cache.

    A named profile, including ``default``, is pinned for botocore. Without
    one the SDK default chain is used and cached as the default profile.
    """
    resolver = SessionCredentialResolver.for_profile(config.profile, config.region)
    return CredentialCacheProvider(
        resolver,
        config.profile_name,
        settings.cache_dir,
        expiry_margin=CACHE_EXPIRY_MARGIN,
    )


def create_session(config: LaunchConfig, resolver: CredentialResolver) -> boto3.session.Session:
    """Create a boto3 session whose credentials come from the resolver.

    Nothing is resolved until the first AWS call.
    """
    core_session = botocore.session.get_session()
    if config.profile:
        core_session.set_config_variable("profile", config.profile)
    core_session.register_component(
        "credential_provider", BotocoreCredentialResolver([CachedCredentialSource(resolver)])
    )
    return boto3.session.Session(botocore_session=core_session, region_name=config.region)
