"""Credential resolution through the AWS SDK credential chain."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import StrEnum

import boto3
import botocore.session
from botocore.exceptions import BotoCoreError, ClientError

from ecs_local.config.settings import DEFAULT_PROFILE
from ecs_local.errors import CredentialError

logger = logging.getLogger(__name__)


class CredentialKind(StrEnum):
    """What produced a credential, and therefore whether it may be cached."""

    SESSION = "session"
    STATIC = "static"
    AMBIENT = "ambient"

    @property
    def renewable(self) -> bool:
        """Return true for short-lived, provider-issued session credentials."""
        return self is CredentialKind.SESSION


# botocore credential method tags grouped by kind.
SESSION_METHODS = frozenset(
    {
        "assume-role",
        "assume-role-with-web-identity",
    }
)
STATIC_METHODS = frozenset(
    {
        "explicit",
        "env",
        "shared-credentials-file",
        "config-file",
        "boto-config",
    }
)
# Everything else is ambient, including sso: botocore keeps the SSO login token
# on disk and fetches role credentials from it without prompting.


def classify_provider(method: str | None) -> CredentialKind:
    """Map a botocore credential method onto a credential kind.

    Args:
        method: The ``method`` attribute of botocore credentials.

    Returns:
        The credential kind. Unknown methods are ambient and never cached.
    """
    if method in SESSION_METHODS:
        return CredentialKind.SESSION
    if method in STATIC_METHODS:
        return CredentialKind.STATIC
    return CredentialKind.AMBIENT


@dataclass(frozen=True)
class ResolvedCredential:
    """A usable set of AWS keys and where they came from."""

    access_key_id: str
    secret_access_key: str
    session_token: str | None
    provider: str
    expires_at: datetime | None = None

    @property
    def kind(self) -> CredentialKind:
        """Return the kind of provider that issued the credential."""
        return classify_provider(self.provider)


class CredentialResolver(ABC):
    """Interface for anything that can produce AWS credentials."""

    @abstractmethod
    def resolve(self) -> ResolvedCredential:
        """Resolve a credential, raising CredentialError on failure."""
        raise NotImplementedError

    @abstractmethod
    def is_expired(self) -> bool:
        """Return true when the last resolved credential needs refreshing."""
        raise NotImplementedError


class SessionCredentialResolver(CredentialResolver):
    """Resolve credentials through a boto3 session's default chain.

    Assumed-role profiles that require MFA prompt for the token code on stdin.
    """

    def __init__(
        self,
        session: boto3.session.Session,
        session_duration: timedelta | None = None,
    ) -> None:
        self._session = session
        self._session_duration = session_duration
        self._credentials = None

    @classmethod
    def for_profile(cls, profile: str | None, region: str) -> "SessionCredentialResolver":
        """Create a resolver for a named profile, or the default chain when None."""
        try:
            core_session = botocore.session.Session(profile=profile)
            duration = core_session.get_scoped_config().get("duration_seconds")
            session = boto3.session.Session(botocore_session=core_session, region_name=region)
        except BotoCoreError as exc:
            name = profile or DEFAULT_PROFILE
            raise CredentialError(f"Failed to load AWS profile {name}: {exc}") from exc
        return cls(session, timedelta(seconds=int(duration)) if duration else None)

    def resolve(self) -> ResolvedCredential:
        try:
            credentials = self._session.get_credentials()
            if credentials is None:
                raise CredentialError("No AWS credentials found.")
            frozen = credentials.get_frozen_credentials()
        except (BotoCoreError, ClientError) as exc:
            raise CredentialError(f"Failed to resolve AWS credentials: {exc}") from exc

        self._credentials = credentials
        logger.debug("Resolved AWS credentials using %s", credentials.method)
        kind = classify_provider(credentials.method)
        expires_at = None
        if kind.renewable and self._session_duration:
            expires_at = datetime.now(UTC) + self._session_duration
        return ResolvedCredential(
            access_key_id=frozen.access_key,
            secret_access_key=frozen.secret_key,
            session_token=frozen.token,
            provider=credentials.method,
            expires_at=expires_at,
        )

    def is_expired(self) -> bool:
        if self._credentials is None:
            return True
        refresh_needed = getattr(self._credentials, "refresh_needed", None)
        if refresh_needed is None:
            return False
        return bool(refresh_needed())
