"""Middleware: optional API key authentication for the proxy.

Browser clients may send the key either as a Bearer token or in an
``apikey`` header; both are accepted.
"""

from __future__ import annotations

import secrets
from typing import TYPE_CHECKING, Annotated

from fastapi import Depends, Header, HTTPException, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

if TYPE_CHECKING:
    from starlette.datastructures import Headers

    from bovisense.config import Settings

CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

_bearer_scheme = HTTPBearer(auto_error=False)


class PermissiveCORSMiddleware(CORSMiddleware):
    """CORS middleware whose pre-flight answer is always an empty 200.

    Requested origins, methods and headers are not checked against the
    allow-lists; the browser enforces the returned headers itself.
    """

    def preflight_response(self, request_headers: Headers) -> Response:
        return Response(status_code=status.HTTP_200_OK, headers=CORS_HEADERS)


def _get_settings_from_request(request: Request) -> Settings:
    settings: Settings = request.app.state.settings
    return settings


def _matches(candidate: str | None, expected: str) -> bool:
    return candidate is not None and secrets.compare_digest(candidate.encode(), expected.encode())


async def verify_api_key(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer_scheme)],
    apikey: Annotated[str | None, Header()] = None,
) -> None:
    """Reject the request unless it carries the configured key.

    Disabled when BOVISENSE_API_KEY is unset.
    """
    expected = _get_settings_from_request(request).api_key
    if expected is None:
        return

    token = credentials.credentials if credentials is not None else None
    if _matches(token, expected) or _matches(apikey, expected):
        return

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or missing API key",
        headers={"WWW-Authenticate": "Bearer"},
    )
