"""Default HTTP transport backed by requests."""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Union

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .errors import TransportError
from .ports import HttpResponse

logger = logging.getLogger(__name__)


def _create_session(retries: Optional[Retry], pool_maxsize: int) -> requests.Session:
    adapter = HTTPAdapter(
        max_retries=retries if retries is not None else Retry(total=0, raise_on_status=False),
        pool_maxsize=pool_maxsize,
    )
    session = requests.Session()
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class RequestsTransport:
    """``Transport`` over a pooled ``requests.Session``.

    The client core performs no retries; pass a ``urllib3`` ``Retry`` to
    have the connection pool retry instead.

    Args:
        session: Pre-configured session (mainly for tests and proxies)
        retries: Retry policy for the HTTP adapter; none by default
        pool_maxsize: Connections kept per host
        verify: TLS verification flag or CA bundle path
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        retries: Optional[Retry] = None,
        pool_maxsize: int = 10,
        verify: Union[bool, str] = True,
    ):
        self._session = session or _create_session(retries, pool_maxsize)
        self._verify = verify

    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[bytes],
        timeout: Optional[float],
    ) -> HttpResponse:
        try:
            response = self._session.request(
                method,
                url,
                headers=dict(headers),
                data=body,
                timeout=timeout,
                verify=self._verify,
                allow_redirects=False,
            )
        except requests.exceptions.Timeout as e:
            raise TransportError(f"{method} {url} timed out: {e}") from e
        except requests.exceptions.SSLError as e:
            raise TransportError(f"TLS failure for {url}: {e}") from e
        except requests.exceptions.ConnectionError as e:
            raise TransportError(f"connection to {url} failed: {e}") from e
        except requests.exceptions.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

        logger.debug("%s %s -> %d", method, url, response.status_code)
        return HttpResponse(
            status=response.status_code,
            headers={name.lower(): value for name, value in response.headers.items()},
            body=response.content or b"",
        )

    def close(self) -> None:
        self._session.close()


__all__ = ["RequestsTransport"]
