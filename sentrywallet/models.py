"""
sentrywallet/models.py
Value types shared by the login view controllers and the Auth Service adapter.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

MIN_SIGN_UP_PASSWORD_LENGTH = 6


class AuthMode(Enum):
    SIGN_IN = "sign_in"
    SIGN_UP = "sign_up"

    @property
    def required_fields(self) -> tuple[str, ...]:
        if self is AuthMode.SIGN_UP:
            return ("full_name", "email", "password")
        return ("email", "password")

    @property
    def min_password_length(self) -> int:
        """Minimum accepted password length; 0 means unconstrained."""
        return MIN_SIGN_UP_PASSWORD_LENGTH if self is AuthMode.SIGN_UP else 0

    def toggled(self) -> "AuthMode":
        return AuthMode.SIGN_IN if self is AuthMode.SIGN_UP else AuthMode.SIGN_UP


class SubmissionStatus(Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    FAILED = "failed"
    SUCCEEDED = "succeeded"


@dataclass
class Credentials:
    """Form input.  Lives only as long as the login form is shown."""

    email: str = ""
    password: str = ""
    full_name: str = ""

    FIELDS = ("email", "password", "full_name")

    def is_empty(self, field: str) -> bool:
        value = getattr(self, field)
        # Whitespace is a legal password character.
        return not value if field == "password" else not value.strip()

    def __repr__(self) -> str:
        return f"Credentials(email={self.email!r}, full_name={self.full_name!r}, password=***)"


@dataclass(frozen=True)
class SubmissionState:
    """
    Status of the form plus the single line shown in the message region.

    message is only set while FAILED.  It also carries the sign-up
    "check your email" notice, since the view has one message slot.
    """

    status: SubmissionStatus = SubmissionStatus.IDLE
    message: str | None = None

    @classmethod
    def idle(cls) -> "SubmissionState":
        return cls()

    @classmethod
    def submitting(cls) -> "SubmissionState":
        return cls(SubmissionStatus.SUBMITTING)

    @classmethod
    def failed(cls, message: str) -> "SubmissionState":
        return cls(SubmissionStatus.FAILED, message)

    @classmethod
    def succeeded(cls) -> "SubmissionState":
        return cls(SubmissionStatus.SUCCEEDED)

    @property
    def is_submitting(self) -> bool:
        return self.status is SubmissionStatus.SUBMITTING

    @property
    def is_failed(self) -> bool:
        return self.status is SubmissionStatus.FAILED


@dataclass(frozen=True)
class AuthUser:
    id: str
    email: str | None = None
    email_confirmed_at: str | None = None

    @property
    def is_confirmed(self) -> bool:
        return bool(self.email_confirmed_at)

    @classmethod
    def from_supabase(cls, user: Any) -> "AuthUser":
        """Build from a supabase-py User model."""
        confirmed = getattr(user, "email_confirmed_at", None)
        return cls(
            id=str(user.id),
            email=getattr(user, "email", None),
            email_confirmed_at=confirmed.isoformat() if hasattr(confirmed, "isoformat") else confirmed,
        )


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a password sign-in or sign-up call."""

    user: AuthUser | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class OAuthResult:
    """Outcome of starting a redirect-based login; url is where to send the browser."""

    url: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
