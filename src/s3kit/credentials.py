"""Credentials and the credential provider variants.

Providers implement the ``CredentialProvider`` port (see ``ports``):

- StaticProvider: fixed access/secret keys
- ChainedProvider: first provider in a list that can supply credentials
- RefreshingProvider: caches short-lived credentials from a fetch callable
  and refreshes them when they expire

Production sourcing (environment, files, instance metadata) is left to the
caller, who can plug any of those behind ``RefreshingProvider`` or
``ChainedProvider``.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional, Sequence

from .errors import CredentialError

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def mask_access_key(access_key: str) -> str:
    """Shorten an access key for display; never reveals more than 4 chars."""
    if not access_key:
        return "<empty>"
    return access_key[:4] + "****"


@dataclass(frozen=True)
class Credentials:
    """A usable identity for request signing.

    Attributes:
        access_key: Access key id
        secret_key: Secret access key
        session_token: Token accompanying temporary credentials
        expires_at: When temporary credentials stop being valid (UTC)
    """
    access_key: str
    secret_key: str
    session_token: Optional[str] = None
    expires_at: Optional[datetime] = None

    def __post_init__(self):
        # Naive expiry timestamps are taken as UTC
        if self.expires_at is not None and self.expires_at.tzinfo is None:
            object.__setattr__(self, "expires_at", self.expires_at.replace(tzinfo=timezone.utc))

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        return (now or utcnow()) >= self.expires_at

    def __repr__(self) -> str:
        return (
            f"Credentials(access_key={mask_access_key(self.access_key)!r}, "
            f"secret_key='****', session_token={'****' if self.session_token else None!r}, "
            f"expires_at={self.expires_at!r})"
        )

    __str__ = __repr__


class StaticProvider:
    """Always returns the same credentials."""

    def __init__(self, access_key: str, secret_key: str, session_token: Optional[str] = None):
        self._credentials = Credentials(
            access_key=access_key,
            secret_key=secret_key,
            session_token=session_token,
        )

    def retrieve(self) -> Credentials:
        if not self._credentials.access_key:
            raise CredentialError("static provider: access key is empty")
        if not self._credentials.secret_key:
            raise CredentialError("static provider: secret key is empty")
        return self._credentials

    def __repr__(self) -> str:
        return f"StaticProvider({self._credentials!r})"


class ChainedProvider:
    """Returns credentials from the first provider that can supply them.

    The provider that succeeded last is tried first on the next call. The
    remembered index is a single attribute write, so concurrent callers at
    worst try the chain in the original order.
    """

    def __init__(self, providers: Sequence):
        if not providers:
            raise CredentialError("chained provider needs at least one provider")
        self._providers = list(providers)
        self._last: Optional[int] = None

    def retrieve(self) -> Credentials:
        order = list(range(len(self._providers)))
        last = self._last
        if last is not None:
            order.remove(last)
            order.insert(0, last)

        failures: List[str] = []
        for index in order:
            provider = self._providers[index]
            try:
                credentials = provider.retrieve()
            except CredentialError as exc:
                failures.append(f"{type(provider).__name__}: {exc}")
                continue
            except Exception as exc:
                logger.debug("%s failed in chain", type(provider).__name__, exc_info=True)
                failures.append(f"{type(provider).__name__}: {exc}")
                continue
            self._last = index
            return credentials

        raise CredentialError("no provider in chain supplied credentials; " + "; ".join(failures))


class _Refresh:
    """One in-flight refresh; waiters block on ``done``."""

    def __init__(self):
        self.done = threading.Event()
        self.credentials: Optional[Credentials] = None
        self.refresh_at: Optional[datetime] = None
        self.error: Optional[CredentialError] = None


class RefreshingProvider:
    """Caches credentials from ``fetch`` and refreshes them near expiry.

    Concurrent callers that find the cache stale share a single call to
    ``fetch``: the first caller runs it, the rest wait for and reuse its
    outcome, including a failure.

    Args:
        fetch: Callable returning fresh ``Credentials``; any exception it
            raises is reported as ``CredentialError``
        expiry_margin: Refresh this long before ``expires_at``; credentials
            that live shorter than twice the margin refresh halfway through
        clock: Returns the current UTC time (injectable for tests)
    """

    def __init__(
        self,
        fetch: Callable[[], Credentials],
        expiry_margin: timedelta = timedelta(seconds=60),
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._fetch = fetch
        self._margin = expiry_margin
        self._clock = clock or utcnow
        self._lock = threading.Lock()
        self._cached: Optional[Credentials] = None
        self._refresh_at: Optional[datetime] = None
        self._inflight: Optional[_Refresh] = None

    def _refresh_deadline(self, credentials: Credentials, now: datetime) -> Optional[datetime]:
        if credentials.expires_at is None:
            return None
        margin = min(self._margin, (credentials.expires_at - now) / 2)
        return credentials.expires_at - margin

    def _is_fresh(self) -> bool:
        return self._refresh_at is None or self._clock() < self._refresh_at

    def retrieve(self) -> Credentials:
        with self._lock:
            cached = self._cached
            if cached is not None and self._is_fresh():
                return cached
            refresh = self._inflight
            leader = refresh is None
            if leader:
                refresh = self._inflight = _Refresh()

        if leader:
            self._run(refresh)
        else:
            refresh.done.wait()

        if refresh.error is not None:
            if leader:
                raise refresh.error
            raise CredentialError(str(refresh.error)) from refresh.error
        return refresh.credentials

    def _run(self, refresh: _Refresh) -> None:
        try:
            credentials = self._fetch()
            if not isinstance(credentials, Credentials):
                raise CredentialError(
                    f"credential fetch returned {type(credentials).__name__}, expected Credentials"
                )
            now = self._clock()
            if credentials.is_expired(now):
                raise CredentialError("credential fetch returned already expired credentials")
            refresh.credentials = credentials
            refresh.refresh_at = self._refresh_deadline(credentials, now)
            logger.debug("Refreshed credentials for %s", mask_access_key(credentials.access_key))
        except CredentialError as exc:
            refresh.error = exc
        except Exception as exc:
            error = CredentialError(f"credential refresh failed: {exc}")
            error.__cause__ = exc
            refresh.error = error
        finally:
            with self._lock:
                if refresh.credentials is not None:
                    self._cached = refresh.credentials
                    self._refresh_at = refresh.refresh_at
                self._inflight = None
            refresh.done.set()

        if refresh.error is not None:
            logger.info("Credential refresh failed: %s", refresh.error)


__all__ = [
    "Credentials",
    "StaticProvider",
    "ChainedProvider",
    "RefreshingProvider",
    "mask_access_key",
]
