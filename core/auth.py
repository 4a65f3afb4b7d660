"""Administrator sign-in for the ParkSettle app."""

from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass

from config.settings import AppSettings

__all__ = ["AuthenticationError", "AuthenticatedUser", "verify_credentials"]


class AuthenticationError(RuntimeError):
    """Raised when sign-in is impossible or the credentials are wrong."""


@dataclass(frozen=True)
class AuthenticatedUser:
    email: str

    @property
    def user_id(self) -> str:
        """Stable opaque identifier stored on the records this user submits."""

        return hashlib.sha256(self.email.encode("utf-8")).hexdigest()[:16]


def verify_credentials(settings: AppSettings, email: str, password: str) -> AuthenticatedUser:
    email = (email or "").strip()
    if not email or not password:
        raise AuthenticationError("이메일과 비밀번호를 모두 입력해주세요.")
    if not settings.admin_email or not settings.admin_password:
        raise AuthenticationError("관리자 계정이 설정되지 않았습니다. 관리자에게 문의하세요.")

    email_ok = hmac.compare_digest(
        email.casefold().encode("utf-8"),
        settings.admin_email.strip().casefold().encode("utf-8"),
    )
    password_ok = hmac.compare_digest(password.encode("utf-8"), settings.admin_password.encode("utf-8"))
    if not (email_ok and password_ok):
        raise AuthenticationError("이메일 또는 비밀번호가 올바르지 않습니다.")
    return AuthenticatedUser(email=email)
