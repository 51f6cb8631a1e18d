"""
sentrywallet/service.py
The Auth Service contract consumed by the login view, and its Supabase
adapter.

The view controllers only ever see AuthService.  Tests substitute a fake;
the pages inject SupabaseAuthService wrapping the per-session client from
sentrywallet.db.
"""

import asyncio
import logging
from typing import Any, Callable, Protocol

from supabase import AuthError, Client

from sentrywallet.models import AuthResult, AuthUser, OAuthResult

logger = logging.getLogger(__name__)

SIGNED_IN = "SIGNED_IN"

AuthEventCallback = Callable[[str, Any], None]


class Subscription(Protocol):
    def unsubscribe(self) -> None: ...


class RedirectSource(Protocol):
    """Where an OAuth provider leaves tokens on the return trip."""

    def redirect_tokens(self) -> tuple[str, str] | None: ...

    def strip_redirect_fragment(self) -> None: ...


class AuthService(Protocol):
    """Operations the login view needs from the identity provider."""

    async def get_session(self) -> Any | None: ...

    def on_auth_state_change(self, callback: AuthEventCallback) -> Subscription: ...

    async def sign_in_with_password(self, email: str, password: str) -> AuthResult: ...

    async def sign_up(self, email: str, password: str, full_name: str) -> AuthResult: ...

    async def sign_in_with_oauth(self, provider: str, redirect_to: str) -> OAuthResult: ...


# ─── Supabase adapter ────────────────────────────────────────────────────────

class SupabaseAuthService:
    """
    AuthService backed by a synchronous supabase-py client.

    Each call runs in a worker thread via asyncio.to_thread so the event
    loop is never blocked.  AuthError raised by supabase-py is returned as a
    result error carrying the provider's message; anything else propagates.

    redirect, when given, is where an OAuth provider handed back an
    (access_token, refresh_token) pair.  get_session installs it first, the
    way supabase-js detects a session in the URL.  Tokens the provider
    rejects are stripped before the error propagates, so a rerun does not
    try them again.
    """

    def __init__(self, client: Client, redirect: RedirectSource | None = None) -> None:
        self._client = client
        self._redirect = redirect

    async def get_session(self) -> Any | None:
        tokens = self._redirect.redirect_tokens() if self._redirect else None
        if tokens:
            access_token, refresh_token = tokens
            logger.debug("Installing session from OAuth redirect")
            try:
                response = await asyncio.to_thread(
                    self._client.auth.set_session, access_token, refresh_token
                )
            except Exception:
                self._redirect.strip_redirect_fragment()
                raise
            return response.session
        return await asyncio.to_thread(self._client.auth.get_session)

    def on_auth_state_change(self, callback: AuthEventCallback) -> Subscription:
        return self._client.auth.on_auth_state_change(callback)

    async def sign_in_with_password(self, email: str, password: str) -> AuthResult:
        try:
            response = await asyncio.to_thread(
                self._client.auth.sign_in_with_password,
                {"email": email, "password": password},
            )
        except AuthError as exc:
            logger.info("Password sign-in rejected: %s", exc.message)
            return AuthResult(error=exc.message)
        return AuthResult(user=_user_or_none(response.user))

    async def sign_up(self, email: str, password: str, full_name: str) -> AuthResult:
        try:
            response = await asyncio.to_thread(
                self._client.auth.sign_up,
                {
                    "email": email,
                    "password": password,
                    "options": {"data": {"full_name": full_name}},
                },
            )
        except AuthError as exc:
            logger.info("Sign-up rejected: %s", exc.message)
            return AuthResult(error=exc.message)
        return AuthResult(user=_user_or_none(response.user))

    async def sign_in_with_oauth(self, provider: str, redirect_to: str) -> OAuthResult:
        try:
            response = await asyncio.to_thread(
                self._client.auth.sign_in_with_oauth,
                {"provider": provider, "options": {"redirect_to": redirect_to}},
            )
        except AuthError as exc:
            logger.warning("OAuth initiation with %s failed: %s", provider, exc.message)
            return OAuthResult(error=exc.message)
        return OAuthResult(url=response.url)


def _user_or_none(user: Any) -> AuthUser | None:
    return AuthUser.from_supabase(user) if user is not None else None
