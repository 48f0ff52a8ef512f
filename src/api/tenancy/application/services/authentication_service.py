"""Authentication of tenant users by personal access token.

Tokens are looked up in the tenant database the current request is bound
to, so a token issued by one company never authenticates against another.
"""

from __future__ import annotations

from tenancy.application.exceptions import AuthenticationError
from tenancy.application.observability import (
    AuthenticationProbe,
    DefaultAuthenticationProbe,
)
from tenancy.application.security import extract_prefix, verify_token
from tenancy.domain.aggregates import User
from tenancy.ports.repositories import ITenantUserRepository


class AuthenticationService:
    """Resolves a bearer token to an active tenant user."""

    def __init__(
        self,
        user_repository: ITenantUserRepository,
        database: str,
        probe: AuthenticationProbe | None = None,
    ):
        self._users = user_repository
        self._database = database
        self._probe = probe or DefaultAuthenticationProbe()

    async def authenticate(self, token: str | None) -> User:
        """Return the user owning ``token``.

        Raises:
            AuthenticationError: If the token is missing, unknown, or belongs
                to a deactivated user
        """
        if not token:
            self._probe.authentication_failed("missing_token")
            raise AuthenticationError("Authentication required")

        candidates = await self._users.find_token_candidates(extract_prefix(token))
        for token_hash, user_id in candidates:
            if not verify_token(token, token_hash):
                continue

            user = await self._users.get_by_id(user_id)
            if user is None or not user.is_active:
                self._probe.authentication_failed("inactive_user")
                raise AuthenticationError("Invalid authentication credentials")

            self._probe.user_authenticated(user.id.value, self._database)
            return user

        self._probe.authentication_failed("unknown_token")
        raise AuthenticationError("Invalid authentication credentials")
