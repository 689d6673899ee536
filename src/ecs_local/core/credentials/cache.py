"""On-disk, profile-keyed cache for assumed-role credentials."""

import logging
import os
import tempfile
from datetime import UTC, datetime, timedelta
from pathlib import Path

from pydantic import BaseModel, ValidationError

from ecs_local.core.credentials.resolver import CredentialResolver, ResolvedCredential
from ecs_local.errors import CredentialCacheWriteError, CredentialError

logger = logging.getLogger(__name__)

# STS default for assumed-role sessions.
DEFAULT_SESSION_DURATION = timedelta(hours=1)
CACHE_FILE_MODE = 0o600
CACHE_DIR_MODE = 0o755


class CachedCredential(BaseModel):
    """A persisted session credential."""

    access_key_id: str
    secret_access_key: str
    session_token: str | None = None
    provider: str
    expiration: datetime

    def is_expired(self, now: datetime | None = None, margin: timedelta = timedelta(0)) -> bool:
        """Return true once the expiration, less the margin, has passed."""
        now = now or datetime.now(UTC)
        expiration = self.expiration
        if expiration.tzinfo is None:
            expiration = expiration.replace(tzinfo=UTC)
        return expiration - margin <= now

    def to_resolved(self) -> ResolvedCredential:
        """Return the cached value as a resolved credential."""
        return ResolvedCredential(
            access_key_id=self.access_key_id,
            secret_access_key=self.secret_access_key,
            session_token=self.session_token,
            provider=self.provider,
            expires_at=self.expiration,
        )


class CredentialCacheProvider(CredentialResolver):
    """Cache renewable credentials from another resolver, one file per profile.

    Only session credentials are written; static and ambient keys are returned
    without touching the disk.
    """

    def __init__(
        self,
        resolver: CredentialResolver,
        profile: str,
        cache_dir: Path,
        session_duration: timedelta = DEFAULT_SESSION_DURATION,
        expiry_margin: timedelta = timedelta(0),
    ) -> None:
        self._resolver = resolver
        self.profile = profile
        self.cache_dir = cache_dir
        self._session_duration = session_duration
        self._expiry_margin = expiry_margin

    @property
    def path(self) -> Path:
        """Return the cache file for the profile."""
        return cache_path(self.cache_dir, self.profile)

    def retrieve(self) -> ResolvedCredential:
        """Return cached credentials, resolving and caching them on a miss.

        Returns:
            The cached or freshly resolved credential.

        Raises:
            CredentialError: The wrapped resolver failed.
            CredentialCacheWriteError: Resolution succeeded but the cache write
                failed. The credential is available on the exception.
        """
        try:
            self.cache_dir.mkdir(mode=CACHE_DIR_MODE, parents=True, exist_ok=True)
        except OSError as exc:
            logger.debug("Could not create credential cache dir %s: %s", self.cache_dir, exc)

        cached = self._read()
        now = datetime.now(UTC)
        if cached is not None and not cached.is_expired(now, self._expiry_margin):
            logger.debug("Using cached credentials for profile %s", self.profile)
            return cached.to_resolved()

        credential = self._resolver.resolve()
        if not credential.kind.renewable:
            return credential

        expiration = credential.expires_at or now + self._session_duration
        entry = CachedCredential(
            access_key_id=credential.access_key_id,
            secret_access_key=credential.secret_access_key,
            session_token=credential.session_token,
            provider=credential.provider,
            expiration=expiration,
        )
        resolved = entry.to_resolved()
        try:
            self._write(entry)
        except OSError as exc:
            raise CredentialCacheWriteError(
                f"Failed to write credential cache {self.path}: {exc}", resolved
            ) from exc
        logger.debug("Cached credentials for profile %s until %s", self.profile, expiration)
        return resolved

    def resolve(self) -> ResolvedCredential:
        try:
            return self.retrieve()
        except CredentialCacheWriteError as exc:
            logger.warning("%s", exc)
            return exc.credential  # type: ignore[return-value]

    def is_expired(self) -> bool:
        return self._resolver.is_expired()

    def remove(self) -> bool:
        """Delete the cache file for the profile."""
        return forget_profile(self.cache_dir, self.profile)

    def _read(self) -> CachedCredential | None:
        """Read the cache file, treating any failure as a miss."""
        try:
            content = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.debug("Ignoring unreadable credential cache %s: %s", self.path, exc)
            return None

        try:
            return CachedCredential.model_validate_json(content)
        except ValidationError as exc:
            logger.debug("Ignoring invalid credential cache %s: %s", self.path, exc)
            return None

    def _write(self, entry: CachedCredential) -> None:
        """Replace the cache file atomically with owner-only permissions."""
        fd, tmp_name = tempfile.mkstemp(
            dir=self.cache_dir, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(entry.model_dump_json())
            os.chmod(tmp_path, CACHE_FILE_MODE)
            os.replace(tmp_path, self.path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise


def cache_path(cache_dir: Path, profile: str) -> Path:
    """Return the cache file for a profile."""
    return cache_dir / f"profile-{profile}.json"


def forget_profile(cache_dir: Path, profile: str) -> bool:
    """Delete the cached credentials for a profile.

    Args:
        cache_dir: The credential cache directory.
        profile: The profile to forget.

    Returns:
        True when a file was removed, False when there was none.
    """
    path = cache_path(cache_dir, profile)
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    except OSError as exc:
        raise CredentialError(f"Failed to remove credential cache {path}: {exc}") from exc
    return True
