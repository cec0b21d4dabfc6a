"""
Request identity.

Routers only depend on ``get_current_user``; how the identity is carried
(session cookie, bearer token) is the resolver's business.
"""
from abc import ABC, abstractmethod
from typing import Optional

from fastapi import Depends, Request

from chronochef.core.config import get_settings
from chronochef.core.exceptions import AuthenticationRequired
from chronochef.services.auth import AuthService, get_auth_service


class IdentityResolver(ABC):
    """Resolve the authenticated user id of a request or raise AuthenticationRequired."""

    @abstractmethod
    def resolve(self, request: Request) -> str:
        ...


def session_id_from_request(request: Request) -> Optional[str]:
    """Bearer token first, then the session cookie."""
    authorization = request.headers.get("Authorization", "")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()
    return request.cookies.get(get_settings().session_cookie_name)


class SessionIdentityResolver(IdentityResolver):
    def __init__(self, auth_service: AuthService):
        self.auth_service = auth_service

    def resolve(self, request: Request) -> str:
        user_id = self.auth_service.resolve_session(session_id_from_request(request))
        if not user_id:
            raise AuthenticationRequired()
        return user_id


def get_identity_resolver(
    auth_service: AuthService = Depends(get_auth_service),
) -> IdentityResolver:
    return SessionIdentityResolver(auth_service)


def get_current_user(
    request: Request,
    resolver: IdentityResolver = Depends(get_identity_resolver),
) -> str:
    """FastAPI dependency: id of the authenticated user."""
    return resolver.resolve(request)
