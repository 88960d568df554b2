"""Raw GET fetcher shared by both facades.

Turns ``server + "/" + path`` into an :class:`httpx.URL`, issues a single
GET, and decodes the body as strict UTF-8. It never touches the offline
store; caching is the facade's job.

Failures are raised, not returned:

* :class:`~webber.exceptions.InvalidURLError` -- the combined string is not
  an absolute http(s) URL.
* :class:`~webber.exceptions.NetworkError` -- transport errors (DNS,
  refused connections, timeouts) and bodies that are not valid UTF-8.

The HTTP status is not inspected. An error page that arrives over a working
connection is returned like any other body.
"""

from __future__ import annotations

import httpx

from webber.exceptions import InvalidURLError, NetworkError
from webber.output import debug


def build_url(server: str, path: str) -> httpx.URL:
    """Join *server* and *path* with a single ``/`` and validate the result.

    No normalisation is applied: a *path* with a leading slash produces a
    double slash, exactly as written.

    Raises:
        InvalidURLError: If httpx cannot parse the URL, or it lacks an
            http(s) scheme or a host.
    """
    raw = f"{server}/{path}"
    try:
        url = httpx.URL(raw)
    except (httpx.InvalidURL, TypeError, ValueError) as exc:
        raise InvalidURLError(f"Invalid URL {raw!r}: {exc}") from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise InvalidURLError(f"Invalid URL {raw!r}: expected an absolute http(s) URL")
    return url


def _decode_body(response: httpx.Response, url: httpx.URL) -> str:
    """Decode the body of a finished response, whatever its status."""
    debug(f"GET {url} -> HTTP {response.status_code}")
    try:
        return response.content.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise NetworkError(f"GET {url} returned a body that is not UTF-8: {exc}") from exc


def fetch_text(client: httpx.Client, server: str, path: str) -> str:
    """Blocking GET of ``server/path`` returning the body text.

    Args:
        client: An open :class:`httpx.Client`. No ``base_url`` is used; the
            full URL is built here.
        server: Base address, without trailing slash by convention.
        path: Relative path, without leading slash by convention.

    Raises:
        InvalidURLError: See :func:`build_url`.
        NetworkError: On transport failure or a non-UTF-8 body.
    """
    url = build_url(server, path)
    debug(f"GET {url}")
    try:
        response = client.get(url)
    except httpx.HTTPError as exc:
        raise NetworkError(f"GET {url} failed: {exc}") from exc
    return _decode_body(response, url)


async def afetch_text(client: httpx.AsyncClient, server: str, path: str) -> str:
    """Non-blocking equivalent of :func:`fetch_text`."""
    url = build_url(server, path)
    debug(f"GET {url}")
    try:
        response = await client.get(url)
    except httpx.HTTPError as exc:
        raise NetworkError(f"GET {url} failed: {exc}") from exc
    return _decode_body(response, url)
