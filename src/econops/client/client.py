"""Synchronous EconOps API client with signing and response caching.

This module provides :class:`Client`, the entry point for library users. It
wraps :class:`httpx.Client` and layers on:

- **Bearer auth** -- every request carries ``Authorization: Bearer <token>``.
- **Request signing** -- a deterministic signature
  (:func:`~econops.signature.callsignature`) travels in the JSON body of
  every non-GET request, never in the URL.
- **Response caching** -- successful JSON responses are written to a
  :class:`~econops.cache.ResponseCache`. The cache is read back only for GET
  requests and requests without a payload.

Each :meth:`Client.request` performs at most one network round trip; there
is no retry.
"""

from __future__ import annotations

import json
from typing import Any, Optional

import httpx

from econops.cache import ResponseCache
from econops.config import get_cache_dir, resolve_token
from econops.exceptions import InvalidUsageError, NetworkError, SerializationError
from econops.models import DEFAULT_BASE_URL, CacheEntry, CacheStats, ClientConfig
from econops.output import get_output
from econops.signature import callsignature, normalize_payload

# Headers describing the original wire encoding; a replayed cached body is
# re-encoded by httpx, so these would no longer match.
_STALE_CACHE_HEADERS = frozenset({"content-encoding", "content-length", "transfer-encoding"})


class Client:
    """Client for the EconOps statistical-computation API.

    Args:
        token: API token. Falls back to ``$ECONOPS_TOKEN``, then to
            *fallback_token*.
        base_url: API root. A trailing slash is stripped.
        use_cache: Read and write the response cache.
        headers: Extra headers sent with every request.
        cache: Cache instance to use. Defaults to a
            :class:`~econops.cache.ResponseCache` in *cache_dir*.
        cache_dir: Cache directory when *cache* is not given. Defaults to
            :func:`~econops.config.get_cache_dir`.
        fallback_token: Token used when neither *token* nor the environment
            supplies one.
        timeout: Request timeout in seconds.
        verify_ssl: Verify TLS certificates. Off by default.
        transport: Custom :class:`httpx.BaseTransport` (e.g.
            :class:`httpx.MockTransport` in tests).

    Raises:
        ConfigurationError: If no token can be resolved. Raised before any
            network or disk access.

    Example::

        client = Client(token="your_api_token")
        response = client.request("/compute/pca", {
            "data": [[1, 2, 3], [4, 5, 6]],
            "n_components": 2,
        })
        if response.status_code == 200:
            print(response.json()["explained_variance"])
    """

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        use_cache: bool = True,
        *,
        headers: Optional[dict[str, str]] = None,
        cache: Optional[ResponseCache] = None,
        cache_dir: Optional[str] = None,
        fallback_token: Optional[str] = None,
        timeout: float = 30.0,
        verify_ssl: bool = False,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        resolved = resolve_token(token, fallback_token)
        default_headers = {
            "Authorization": f"Bearer {resolved}",
            "Content-Type": "application/json",
        }
        default_headers.update(headers or {})

        self._config = ClientConfig(
            token=resolved,
            base_url=base_url.rstrip("/"),
            use_cache=use_cache,
            headers=default_headers,
        )
        self._cache = cache if cache is not None else ResponseCache(cache_dir or get_cache_dir())
        self._timeout = timeout
        self._verify_ssl = verify_ssl
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    # ------------------------------------------------------------------ #
    # Properties
    # ------------------------------------------------------------------ #

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def token(self) -> str:
        return self._config.token

    @property
    def base_url(self) -> str:
        return self._config.base_url

    @property
    def use_cache(self) -> bool:
        return self._config.use_cache

    @property
    def headers(self) -> dict[str, str]:
        return dict(self._config.headers)

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP connection pool and the cache store."""
        if self._client is not None:
            self._client.close()
            self._client = None
        self._cache.close()

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def request(
        self,
        route: str,
        payload: Any = None,
        method: str = "POST",
        signature: Optional[str] = None,
    ) -> httpx.Response:
        """Call *route*, serving from the cache when allowed.

        A request that carries a payload is always sent as POST, with the
        payload and its signature in the JSON body. A request without a
        payload is sent with *method*; GET requests carry no body at all.

        The cache is read only for GET requests and requests without a
        payload. Every 200 response with a JSON body is written to it.

        Args:
            route: API route, e.g. ``/compute/pca``.
            payload: JSON-compatible request data. Must be a mapping when
                given, since the signature is added to it as a field.
            method: HTTP method for requests without a payload.
            signature: Precomputed signature that replaces the generated one.

        Returns:
            The :class:`httpx.Response`. Non-200 responses are returned
            unchanged.

        Raises:
            SerializationError: If *payload* is not a JSON object.
            InvalidUsageError: If *route* does not form a valid URL.
            NetworkError: On transport failures.
        """
        method = method.upper()
        request_data = normalize_payload({} if payload is None else payload)
        sig = callsignature(route, request_data, pregiven=signature)
        url = f"{self.base_url}{route}"
        output = get_output()

        if self.use_cache and (method == "GET" or payload is None):
            result = self._cache.lookup(sig)
            if result.error is not None:
                output.debug(f"Cache read failed, treating as miss: {result.error}")
            if result.entry is not None:
                output.debug(f"Cache hit: {method} {route}")
                return self._replay(result.entry, method, url)
            output.debug(f"Cache miss: {method} {route}")

        if payload is not None:
            method = "POST"

        if method == "GET":
            response = self._send(method, url)
        else:
            if not isinstance(request_data, dict):
                raise SerializationError("Request payload must be a JSON object")
            body = dict(request_data)
            body["signature"] = sig
            response = self._send(method, url, body)

        if self.use_cache and response.status_code == 200:
            self._cache_response(sig, response)

        return response

    get = request

    def clear_cache(self) -> int:
        """Remove every cached response; returns the number removed."""
        return self._cache.clear()

    def cache_info(self) -> CacheStats:
        """Return directory, entry count and size of the response cache."""
        return self._cache.stats()

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _http(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                timeout=self._timeout,
                verify=self._verify_ssl,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    def _send(self, method: str, url: str, body: Optional[dict[str, Any]] = None) -> httpx.Response:
        """Perform one HTTP round trip, mapping transport errors to NetworkError."""
        kwargs: dict[str, Any] = {"headers": self._config.headers}
        if body is not None:
            kwargs["content"] = json.dumps(body, ensure_ascii=False).encode("utf-8")
        try:
            return self._http().request(method, url, **kwargs)
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as exc:
            raise InvalidUsageError(f"Invalid request URL {url!r}: {exc}") from exc
        except httpx.TransportError as exc:
            raise NetworkError(f"{method} {url} failed: {exc}") from exc

    def _cache_response(self, sig: str, response: httpx.Response) -> None:
        """Write a 200 response to the cache if its body is JSON."""
        output = get_output()
        try:
            data = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            output.warning(f"Failed to parse response for caching: {exc}")
            return

        entry = CacheEntry(
            status_code=response.status_code,
            data=data,
            headers=dict(response.headers),
        )
        result = self._cache.store(sig, entry)
        if result.error is not None:
            output.debug(f"Cache write dropped: {result.error}")

    @staticmethod
    def _replay(entry: CacheEntry, method: str, url: str) -> httpx.Response:
        """Build a response object from a cached entry."""
        headers = {
            k: v for k, v in entry.headers.items() if k.lower() not in _STALE_CACHE_HEADERS
        }
        return httpx.Response(
            status_code=entry.status_code,
            headers=headers,
            json=entry.data,
            request=httpx.Request(method=method, url=url),
        )
