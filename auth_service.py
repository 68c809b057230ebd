import hashlib
import hmac
import logging
import secrets

import bcrypt

from db import SessionRepository, SettingsRepository, UserRepository

logger = logging.getLogger(__name__)

# bcrypt only uses the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72
MIN_PASSWORD_LENGTH = 6


class AuthError(Exception):
    """Raised for rejected credentials or unknown session tokens."""


class AuthService:
    """Sign users up, in and out using opaque session tokens.

    Tokens are returned to the caller once and only an HMAC digest keyed by
    the ``session_secret`` setting is stored.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        session_repo: SessionRepository,
        settings_repo: SettingsRepository,
    ) -> None:
        self.users = user_repo
        self.sessions = session_repo
        self.settings = settings_repo

    @staticmethod
    def _normalize_email(email: str) -> str:
        return (email or "").strip().lower()

    @staticmethod
    def _password_bytes(password: str) -> bytes:
        return password.encode("utf-8")[:MAX_PASSWORD_BYTES]

    def hash_password(self, password: str) -> str:
        rounds = self.settings.get_int("bcrypt_rounds", 12)
        salt = bcrypt.gensalt(rounds=rounds)
        return bcrypt.hashpw(self._password_bytes(password), salt).decode("utf-8")

    def verify_password(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(
                self._password_bytes(password), password_hash.encode("utf-8")
            )
        except ValueError as e:
            logger.warning("Password hash could not be checked: %s", e)
            return False

    def _secret(self) -> bytes:
        secret = self.settings.get_text("session_secret", "")
        if not secret:
            secret = secrets.token_hex(32)
            self.settings.set_text("session_secret", secret)
        return secret.encode("utf-8")

    def _digest(self, token: str) -> str:
        return hmac.new(self._secret(), token.encode("utf-8"), hashlib.sha256).hexdigest()

    def _open_session(self, user_id: str) -> str:
        token = secrets.token_urlsafe(32)
        self.sessions.add(self._digest(token), user_id)
        return token

    def sign_up(self, email: str, password: str) -> dict[str, object]:
        """Create an account and return ``{"token", "user"}``."""
        address = self._normalize_email(email)
        if "@" not in address:
            raise AuthError("a valid email is required")
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise AuthError(
                f"password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        try:
            user_id = self.users.create(address, self.hash_password(password))
        except ValueError as e:
            raise AuthError(str(e)) from e
        logger.info("Created account %s", user_id)
        return {
            "token": self._open_session(user_id),
            "user": {"id": user_id, "email": address},
        }

    def sign_in(self, email: str, password: str) -> dict[str, object]:
        address = self._normalize_email(email)
        user = self.users.fetch_by_email(address)
        if user is None or not self.verify_password(password or "", user["password_hash"]):
            logger.warning("Rejected sign-in attempt")
            raise AuthError("invalid email or password")
        return {
            "token": self._open_session(user["id"]),
            "user": {"id": user["id"], "email": user["email"]},
        }

    def sign_out(self, token: str) -> None:
        if not token or not self.sessions.delete(self._digest(token)):
            raise AuthError("not signed in")

    def get_current_user(self, token: str | None) -> dict[str, str] | None:
        """Return ``{"id", "email"}`` for ``token`` or ``None`` if unknown."""
        if not token:
            return None
        user_id = self.sessions.fetch_user_id(self._digest(token))
        if user_id is None:
            return None
        try:
            return self.users.fetch(user_id)
        except ValueError:
            return None

    def require_user_id(self, token: str | None) -> str:
        user = self.get_current_user(token)
        if user is None:
            raise AuthError("not authenticated")
        return user["id"]
