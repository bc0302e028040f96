"""JWT authentication provider implementation.

Tokens are HS256-signed with the shared platform secret. Payload:
    {
        "sub": "user-uuid",
        "email": "user@example.com",
        "name": "Jane",
        "roles": ["STUDENT", "INSTRUCTOR"],
        "exp": 1234567890
    }

A single ``role`` claim is accepted as well and folded into ``roles``.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional
from uuid import UUID

from jose import JWTError, jwt

from core.config import settings
from infrastructure.auth.provider import TokenUser

logger = logging.getLogger(__name__)


def _extract_roles(payload: dict[str, Any]) -> list[str]:
    roles = payload.get("roles") or []
    if isinstance(roles, str):
        roles = [roles]
    role = payload.get("role")
    if role and role not in roles:
        roles = [*roles, role]
    return [str(r).upper() for r in roles]


class JWTAuthProvider:
    """JWT-based authentication provider."""

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate a JWT token and extract user info.

        Args:
            token: The JWT to validate

        Returns:
            TokenUser if valid, None if invalid or expired
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_aud": False},
            )
        except JWTError:
            return None

        user_id = payload.get("sub")
        email = payload.get("email")

        if not user_id or not email:
            return None

        try:
            parsed_id = UUID(user_id)
        except ValueError:
            logger.warning("Token subject is not a UUID: %s", user_id)
            return None

        return TokenUser(
            id=parsed_id,
            email=email,
            display_name=payload.get("name"),
            roles=_extract_roles(payload),
        )

    def create_token(self, user: TokenUser) -> str:
        """
        Create a JWT token for a user.

        Args:
            user: The user to create a token for

        Returns:
            The generated JWT string
        """
        expire = datetime.now(timezone.utc) + timedelta(minutes=self._expire_minutes)

        payload: dict = {
            "sub": str(user.id),
            "email": user.email,
            "name": user.display_name,
            "roles": user.roles,
            "exp": expire,
        }

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
