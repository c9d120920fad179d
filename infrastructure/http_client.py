"""Async HTTP client for outbound webhook calls, built from HttpClientSettings."""

from __future__ import annotations

import ssl
from typing import Any, Mapping, Optional, Union

import httpx

from config import HttpClientSettings
from errors import ConfigurationError


class BearerAuth(httpx.Auth):
    def __init__(self, token: str) -> None:
        self._token = token

    def auth_flow(self, request: httpx.Request):
        request.headers["Authorization"] = f"Bearer {self._token}"
        yield request


def _ssl_verify(settings: HttpClientSettings) -> Union[bool, ssl.SSLContext]:
    if not (settings.ca_file or settings.cert_file or settings.key_file):
        return settings.verify_tls

    if settings.key_file and not settings.cert_file:
        raise ValueError("key_file requires cert_file")

    ctx = ssl.create_default_context(cafile=settings.ca_file)
    if not settings.verify_tls:
        ctx.check_hostname = False
        ctx.verify_mode = ssl.CERT_NONE
    if settings.cert_file:
        ctx.load_cert_chain(settings.cert_file, settings.key_file)
    return ctx


def _auth(settings: HttpClientSettings) -> Optional[httpx.Auth]:
    has_basic = settings.basic_auth_username is not None
    if has_basic and settings.bearer_token is not None:
        raise ValueError("at most one of basic auth and bearer token may be set")
    if has_basic:
        password = settings.basic_auth_password
        return httpx.BasicAuth(
            settings.basic_auth_username,
            password.get_secret_value() if password else "",
        )
    if settings.bearer_token is not None:
        return BearerAuth(settings.bearer_token.get_secret_value())
    return None


class HttpClient:
    """Thin async wrapper around httpx.AsyncClient.

    One instance per integration keeps TLS, proxy and timeouts independently
    configurable. The underlying AsyncClient is safe to share between
    concurrent requests.
    """

    def __init__(self, timeout: float = 5.0, **client_options: Any) -> None:
        self._client = httpx.AsyncClient(timeout=timeout, **client_options)

    @classmethod
    def from_settings(
        cls,
        settings: HttpClientSettings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "HttpClient":
        """Build a client, raising ConfigurationError on unusable options."""
        try:
            options: dict[str, Any] = {
                "verify": _ssl_verify(settings),
                "auth": _auth(settings),
                "follow_redirects": settings.follow_redirects,
                "headers": {"User-Agent": settings.user_agent},
            }
            if settings.proxy_url:
                options["proxy"] = settings.proxy_url
            if transport is not None:
                options["transport"] = transport
            return cls(timeout=settings.timeout_seconds, **options)
        except (OSError, ValueError, httpx.InvalidURL) as e:
            # ssl.SSLError and missing cert files are both OSErrors
            raise ConfigurationError(
                f"invalid HTTP client configuration: {e}",
                details={"error_type": type(e).__name__},
            ) from e

    async def post_json(
        self,
        url: str,
        content: bytes,
        *,
        headers: Optional[Mapping[str, str]] = None,
    ) -> httpx.Response:
        """POST a JSON body and return the response with its body fully read.

        The response is released before this returns, on success and on
        every error path, so the connection goes back to the pool clean.
        """
        request_headers = {"Content-Type": "application/json"}
        if headers:
            request_headers.update(headers)

        async with self._client.stream(
            "POST", url, content=content, headers=request_headers
        ) as response:
            await response.aread()
        return response

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()
