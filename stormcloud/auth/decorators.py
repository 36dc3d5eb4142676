"""Decorators for permission-protected routes."""

from functools import wraps

from flask import g

from stormcloud.environment.services import current_environment
from stormcloud.errors import UnauthorizedError
from stormcloud.utils import request_payload, request_token

from .services import get_authorizer


def permission_required(permission):
    """Answer 401 unless the caller holds ``permission`` in the current environment.

    ``permission`` is either a Permission or a callable that builds one from
    the request payload, for permissions that depend on what is submitted:

    @permission_required(READ_ALL)
    def list_things():
        ...

    @permission_required(write_permission_for)
    def create_thing():
        ...

    The token is checked before the callable runs, so an unauthenticated
    caller always gets 401 whatever the payload holds.
    """

    def decorator(func):
        @wraps(func)
        def decorated_function(*args, **kwargs):
            environment = current_environment()
            authorizer = get_authorizer()
            principal = authorizer.authenticate(request_token(), environment)
            if principal is None:
                raise UnauthorizedError()

            required = (
                permission(request_payload()) if callable(permission) else permission
            )
            if not authorizer.permits(principal, required, environment):
                raise UnauthorizedError()

            g.principal = principal
            return func(*args, **kwargs)

        return decorated_function

    return decorator
