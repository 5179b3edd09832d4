# Overview: Request decorators for API routes.

from functools import wraps
from flask import request, g

from .services.claims_service import resolve_claims


def with_claims(f):
    """
    Resolve the caller's claims and expose them as g.claims.

    Never rejects a request: authorization is decided by the services,
    which receive g.claims explicitly.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        g.claims = resolve_claims(request)
        return f(*args, **kwargs)

    return decorated_function
