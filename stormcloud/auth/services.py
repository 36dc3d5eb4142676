"""Service layer for token authentication and authorization."""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

import jwt
from flask import current_app
from werkzeug.security import check_password_hash, generate_password_hash

from stormcloud.core.constants import USERS
from stormcloud.store import get_store

from .permissions import Permission

if TYPE_CHECKING:
    from stormcloud.core.types import Environment
    from stormcloud.store import DocumentStore

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"


@dataclass(frozen=True)
class Principal:
    """An authenticated caller and the permissions granted in one environment."""

    uid: str
    permissions: frozenset[str] = field(default_factory=frozenset)

    def has(self, permission: Permission) -> bool:
        """Check whether this caller holds ``permission``."""
        return permission.is_granted_by(self.permissions)


class Authorizer:
    """Decides whether a bearer token may perform an action in an environment.

    Tokens are HS256 JWTs whose subject is a user id. Permissions are not
    carried in the token: they are read from the user's record on every
    check, so a grant or revocation applies to tokens already issued.
    """

    def __init__(
        self, store: DocumentStore, secret_key: str, expiration_seconds: int = 86400
    ) -> None:
        """Initialize the authorizer."""
        self.store = store
        self.secret_key = secret_key
        self.expiration_seconds = expiration_seconds

    def issue_token(self, uid: str) -> str:
        """Sign a token for ``uid`` that expires after the configured delay."""
        now = datetime.datetime.now(datetime.timezone.utc)
        payload = {
            "sub": uid,
            "iat": now,
            "exp": now + datetime.timedelta(seconds=self.expiration_seconds),
        }
        return jwt.encode(payload, self.secret_key, algorithm=JWT_ALGORITHM)

    def authenticate(
        self, token: Optional[str], environment: Environment
    ) -> Optional[Principal]:
        """Resolve a token to a principal, or None if it is not valid."""
        if not token:
            return None
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[JWT_ALGORITHM])
        except jwt.ExpiredSignatureError:
            logger.warning("Rejected expired token.")
            return None
        except jwt.InvalidTokenError as e:
            logger.warning(f"Rejected token: {e}")
            return None

        uid = payload.get("sub")
        if not uid:
            return None

        user = self.store.get_doc(USERS, {"_id": uid})
        if user is None:
            logger.warning(f"No permission record for user {uid}.")
            return None

        granted = (user.get("permissions") or {}).get(environment["friendlyId"]) or []
        return Principal(uid=uid, permissions=frozenset(granted))

    def authorize(
        self,
        token: Optional[str],
        required_permission: Permission,
        environment: Environment,
    ) -> bool:
        """Return True when the token's holder has ``required_permission``.

        Never raises for bad credentials: a missing, malformed or expired
        token, an unknown user, or an insufficient grant all yield False.
        """
        principal = self.authenticate(token, environment)
        if principal is None:
            return False
        return self.permits(principal, required_permission, environment)

    def permits(
        self,
        principal: Principal,
        required_permission: Permission,
        environment: Environment,
    ) -> bool:
        """Check an already authenticated principal against a permission."""
        if principal.has(required_permission):
            return True
        logger.warning(
            f"User {principal.uid} lacks {required_permission} "
            f"in {environment['friendlyId']}."
        )
        return False

    def check_credentials(self, uid: str, password: Optional[str]) -> bool:
        """Verify a user's own password."""
        user = self.store.get_doc(USERS, {"_id": uid})
        if user is None or not user.get("passwordHash") or not password:
            return False
        return check_password_hash(user["passwordHash"], password)

    def grant(
        self,
        uid: str,
        permissions: list[str],
        environment: Environment,
        password: Optional[str] = None,
    ) -> list[str]:
        """Replace a user's permissions in ``environment``, creating the user.

        Names are validated and normalized before they are stored. A given
        ``password`` becomes the user's login password.
        """
        names = sorted({Permission.parse(name).name for name in permissions})
        user = self.store.get_doc(USERS, {"_id": uid}) or {}

        grants = dict(user.get("permissions") or {})
        grants[environment["friendlyId"]] = names
        record = {"permissions": grants, "passwordHash": user.get("passwordHash")}
        if password:
            record["passwordHash"] = generate_password_hash(password)

        self.store.set_doc(USERS, uid, record)
        logger.info(f"Granted {names} to {uid} in {environment['friendlyId']}.")
        return names


def get_authorizer() -> Authorizer:
    """Build an authorizer over the current request's store."""
    return Authorizer(
        get_store(),
        current_app.config["JWT_SECRET_KEY"],
        current_app.config["JWT_EXPIRATION_SECONDS"],
    )
