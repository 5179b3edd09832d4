# Overview: Resolves per-request caller claims (role, department, user id).

"""
Caller Claims

Every request after login carries its own claims. The default resolver
reads them from plain request headers the client sets itself:

    X-Role:        "admin" or anything else (non-admin)
    X-Department:  department name, optional
    X-User-Id:     numeric user id, optional

SECURITY LIMITATION: header claims are not signed. Any client can claim
to be an admin. Services only ever see a Claims value, so replacing
HeaderClaimsResolver with a verified-token resolver is a config change
(CLAIMS_RESOLVER) plus one register_resolver() call.

Resolution never fails: missing or malformed values just become absent,
and absent role means non-admin.
"""

from __future__ import annotations

from dataclasses import dataclass

from flask import current_app

from ..models import ROLE_ADMIN


@dataclass(frozen=True)
class Claims:
    role: str | None = None
    department: str | None = None
    user_id: int | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


ANONYMOUS = Claims()


class ClaimsResolver:
    """Turns an incoming request into Claims."""

    def resolve(self, request) -> Claims:
        raise NotImplementedError


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _parse_user_id(value: str | None) -> int | None:
    value = _clean(value)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


class HeaderClaimsResolver(ClaimsResolver):
    ROLE_HEADER = "X-Role"
    DEPARTMENT_HEADER = "X-Department"
    USER_ID_HEADER = "X-User-Id"

    def resolve(self, request) -> Claims:
        headers = request.headers
        role = _clean(headers.get(self.ROLE_HEADER))
        return Claims(
            role=role.lower() if role else None,
            department=_clean(headers.get(self.DEPARTMENT_HEADER)),
            user_id=_parse_user_id(headers.get(self.USER_ID_HEADER)),
        )


RESOLVERS: dict[str, type[ClaimsResolver]] = {
    "headers": HeaderClaimsResolver,
}


def register_resolver(name: str, resolver_cls: type[ClaimsResolver]) -> None:
    RESOLVERS[name] = resolver_cls


def get_resolver() -> ClaimsResolver:
    """Resolver named by CLAIMS_RESOLVER, cached on the app."""
    resolver = current_app.extensions.get("claims_resolver")
    if resolver is None:
        name = current_app.config.get("CLAIMS_RESOLVER", "headers")
        try:
            resolver = RESOLVERS[name]()
        except KeyError:
            raise RuntimeError(f"Unknown CLAIMS_RESOLVER {name!r}") from None
        current_app.extensions["claims_resolver"] = resolver
    return resolver


def resolve_claims(request) -> Claims:
    return get_resolver().resolve(request)
