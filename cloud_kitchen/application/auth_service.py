import logging
from datetime import datetime, timezone
from typing import Optional, Tuple

from cloud_kitchen.core.errors import AuthenticationError, ConflictError
from cloud_kitchen.core.security import (
    create_session_token,
    decode_session_token,
    hash_password,
    verify_password,
)
from cloud_kitchen.domain.models import User
from cloud_kitchen.domain.schemas import LoginRequest, Principal, RegisterRequest
from cloud_kitchen.infrastructure.session_store import SessionRevocationStore
from cloud_kitchen.interfaces.IUserRepository import IUserRepository

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, user_repo: IUserRepository, session_store: SessionRevocationStore):
        self.user_repo = user_repo
        self.session_store = session_store

    def register(self, request: RegisterRequest) -> Tuple[User, str]:
        if self.user_repo.find_user_by_email(request.email):
            raise ConflictError("User with this email already exists", field="email")
        user = self.user_repo.create_user(
            email=request.email,
            password_hash=hash_password(request.password),
            name=request.name,
        )
        logger.info("User registered and logged in: %s", user.email)
        return user, create_session_token(user.id, user.role)

    def login(self, request: LoginRequest) -> Tuple[User, str]:
        user = self.user_repo.find_user_by_email(request.email)
        # Same message for unknown email and wrong password
        if user is None or not verify_password(request.password, user.password_hash):
            raise AuthenticationError("Invalid credentials")
        logger.info("User logged in: %s", user.email)
        return user, create_session_token(user.id, user.role)

    def logout(self, principal: Principal) -> None:
        remaining = (principal.expires_at - datetime.now(timezone.utc)).total_seconds()
        self.session_store.revoke(principal.token_id, int(remaining) + 1)
        logger.info("User logged out: %s", principal.user_id)

    def resolve_principal(self, token: Optional[str]) -> Optional[Principal]:
        """Turn a session cookie into the caller's identity, or None."""
        if not token:
            return None
        claims = decode_session_token(token)
        if claims is None or self.session_store.is_revoked(claims["jti"]):
            return None
        try:
            user_id = int(claims["sub"])
        except (TypeError, ValueError):
            return None

        # Role comes from the database so demotions take effect immediately
        user = self.user_repo.find_user_by_id(user_id)
        if user is None:
            logger.warning("Session for missing user %s", user_id)
            return None
        return Principal(
            user_id=user.id,
            email=user.email,
            role=user.role,
            token_id=claims["jti"],
            expires_at=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
        )

    def current_user(self, principal: Principal) -> User:
        user = self.user_repo.find_user_by_id(principal.user_id)
        if user is None:
            raise AuthenticationError()
        return user
