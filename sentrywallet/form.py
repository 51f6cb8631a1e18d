"""
sentrywallet/form.py
Login / sign-up form state machine and the Google login button.

AuthFormController owns the credentials, the current AuthMode and the
SubmissionState.  OAuthInitiator shares that state: both buttons are
disabled while either one is submitting, and both write to the same single
message slot.

State machine:
  Idle -> Submitting -> Succeeded | Failed(message)
  Failed -> Idle on the next field edit or mode toggle
"""

import logging
from typing import Protocol

from sentrywallet.gate import NavigationGate
from sentrywallet.models import AuthMode, Credentials, SubmissionState
from sentrywallet.service import AuthService

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Please fill in all required fields"
PASSWORD_TOO_SHORT_MESSAGE = "Password must be at least {length} characters long"
CONFIRM_EMAIL_MESSAGE = "Please check your email for confirmation link"
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"
GOOGLE_ERROR_PREFIX = "Error with Google login: "
GOOGLE_UNEXPECTED_MESSAGE = "An unexpected error occurred with Google login"

GOOGLE_PROVIDER = "google"


class AuthFormController:
    """Drives the email / password form.  Persist one per browser session."""

    def __init__(
        self,
        service: AuthService,
        gate: NavigationGate | None = None,
        mode: AuthMode = AuthMode.SIGN_IN,
    ) -> None:
        self._service = service
        self.gate = gate
        self.mode = mode
        self.credentials = Credentials()
        self.state = SubmissionState.idle()

    # ─── User input ──────────────────────────────────────────────────────────

    def on_field_change(self, name: str, value: str) -> None:
        """Store a field value.  Typing dismisses the last message."""
        if name not in Credentials.FIELDS:
            raise ValueError(f"Unknown credentials field: {name!r}")
        setattr(self.credentials, name, value)
        if self.state.is_failed:
            self.state = SubmissionState.idle()

    def set_mode(self, mode: AuthMode) -> None:
        """Switch mode, dropping every field and any message together."""
        self.mode = mode
        self.credentials = Credentials()
        self.state = SubmissionState.idle()

    def toggle_mode(self) -> None:
        self.set_mode(self.mode.toggled())

    def release_stale_submission(self) -> None:
        """
        Return to Idle if a previous activation left the form Submitting.

        Only an OAuth hand-off leaves Submitting behind; if the browser never
        left, the user must be able to try again.
        """
        if self.state.is_submitting:
            logger.debug("Releasing submission left over from a previous activation")
            self.state = SubmissionState.idle()

    # ─── Submission ──────────────────────────────────────────────────────────

    def validate(self) -> str | None:
        """Return the client-side validation message, or None if the form is complete."""
        if any(self.credentials.is_empty(field) for field in self.mode.required_fields):
            return MISSING_FIELDS_MESSAGE
        min_length = self.mode.min_password_length
        if len(self.credentials.password) < min_length:
            return PASSWORD_TOO_SHORT_MESSAGE.format(length=min_length)
        return None

    async def on_submit(self) -> SubmissionState:
        """
        Submit the form for the current mode and return the resulting state.

        Ignored while a submission is in flight.  Validation failures never
        reach the Auth Service.  Every exit path leaves Submitting.
        """
        if self.state.is_submitting:
            logger.debug("Submit ignored, a submission is already in flight")
            return self.state
        if self.gate is None:
            raise RuntimeError("AuthFormController.on_submit called outside a view activation")

        problem = self.validate()
        if problem is not None:
            self.state = SubmissionState.failed(problem)
            return self.state

        self.state = SubmissionState.submitting()
        try:
            if self.mode is AuthMode.SIGN_UP:
                await self._sign_up()
            else:
                await self._sign_in()
        except Exception:
            logger.exception("Unexpected error during %s", self.mode.value)
            self.state = SubmissionState.failed(UNEXPECTED_ERROR_MESSAGE)
        finally:
            if self.state.is_submitting:
                self.state = SubmissionState.idle()
        return self.state

    async def _sign_in(self) -> None:
        result = await self._service.sign_in_with_password(
            self.credentials.email, self.credentials.password
        )
        if not result.ok:
            self.state = SubmissionState.failed(result.error)
        elif result.user is not None:
            self._succeed()

    async def _sign_up(self) -> None:
        result = await self._service.sign_up(
            self.credentials.email,
            self.credentials.password,
            self.credentials.full_name,
        )
        if not result.ok:
            self.state = SubmissionState.failed(result.error)
        elif result.user is not None:
            if result.user.is_confirmed:
                self._succeed()
            else:
                self.state = SubmissionState.failed(CONFIRM_EMAIL_MESSAGE)

    def _succeed(self) -> None:
        self.credentials = Credentials()
        self.state = SubmissionState.succeeded()
        self.gate.trigger_once()


# ─── Google login ────────────────────────────────────────────────────────────

class ExternalRedirect(Protocol):
    def redirect(self, url: str) -> None:
        """Send the browser to url, leaving the application."""


class OAuthInitiator:
    """Starts the redirect-based Google login for a form."""

    def __init__(
        self,
        form: AuthFormController,
        service: AuthService,
        external_redirect: ExternalRedirect,
        redirect_to: str,
    ) -> None:
        self._form = form
        self._service = service
        self._external_redirect = external_redirect
        self._redirect_to = redirect_to

    async def on_google_login(self) -> SubmissionState:
        """
        Ask the Auth Service for the provider URL and leave for it.

        On success the form stays Submitting: the browser is on its way out
        and the return trip lands on a new activation of the login view.
        """
        form = self._form
        if form.state.is_submitting:
            return form.state

        form.state = SubmissionState.submitting()
        try:
            result = await self._service.sign_in_with_oauth(GOOGLE_PROVIDER, self._redirect_to)
            if not result.ok:
                form.state = SubmissionState.failed(GOOGLE_ERROR_PREFIX + result.error)
                return form.state
            logger.info("Redirecting to %s sign-in", GOOGLE_PROVIDER)
            self._external_redirect.redirect(result.url)
        except Exception:
            logger.exception("Unexpected error starting Google login")
            form.state = SubmissionState.failed(GOOGLE_UNEXPECTED_MESSAGE)
        return form.state

    def on_redirect_error(self, message: str) -> SubmissionState:
        """Report a failure the provider sent back on the return trip."""
        self._form.state = SubmissionState.failed(GOOGLE_ERROR_PREFIX + message)
        return self._form.state
