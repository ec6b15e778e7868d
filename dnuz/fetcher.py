"""HTTP download of the source archive."""

from __future__ import annotations

import logging

import httpx

from dnuz.errors import FetchFailed

logger = logging.getLogger(__name__)


def fetch(
    url: str,
    *,
    client: httpx.Client | None = None,
    timeout: float | None = None,
) -> bytes:
    """Download ``url`` and return the whole response body.

    Non-success status codes are not treated as errors: the body is
    returned as-is and a warning is logged. Transport failures and
    malformed URLs raise FetchFailed. A caller-supplied client is left open.
    """
    owns_client = client is None
    if client is None:
        client = httpx.Client(timeout=timeout, follow_redirects=True)

    try:
        with client.stream("GET", url) as response:
            data = response.read()
            if response.is_error:
                logger.warning(
                    f"{url} answered {response.status_code} {response.reason_phrase}, "
                    "using the body anyway"
                )
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise FetchFailed(url, str(e) or type(e).__name__) from e
    finally:
        if owns_client:
            client.close()

    logger.info(f"Downloaded {len(data)} bytes from {url}")
    return data
