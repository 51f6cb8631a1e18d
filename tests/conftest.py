import asyncio

import pytest

from sentrywallet.gate import NavigationGate
from sentrywallet.models import AuthResult, AuthUser, OAuthResult

CONFIRMED_USER = AuthUser(id="user-1", email="ada@example.com", email_confirmed_at="2026-01-01T00:00:00+00:00")
UNCONFIRMED_USER = AuthUser(id="user-2", email="bob@example.com")


@pytest.fixture
def anyio_backend():
    return "asyncio"


class FakeSubscription:
    def __init__(self):
        self.unsubscribed = 0

    def unsubscribe(self):
        self.unsubscribed += 1


class FakeAuthService:
    """
    In-memory AuthService.

    emit() delivers to every callback ever registered, including ones whose
    subscription was cancelled, to model an event already in flight at
    teardown.  Result attributes may hold an exception instance to raise.
    """

    def __init__(self, session=None):
        self.session = session
        self.probe_release: asyncio.Event | None = None
        self.callbacks = []
        self.subscriptions = []
        self.calls = []
        self.sign_in_result = AuthResult(user=CONFIRMED_USER)
        self.sign_up_result = AuthResult(user=CONFIRMED_USER)
        self.oauth_result = OAuthResult(url="https://accounts.example.com/authorize")

    async def get_session(self):
        self.calls.append(("get_session",))
        if self.probe_release is not None:
            await self.probe_release.wait()
        if isinstance(self.session, Exception):
            raise self.session
        return self.session

    def on_auth_state_change(self, callback):
        subscription = FakeSubscription()
        self.callbacks.append(callback)
        self.subscriptions.append(subscription)
        return subscription

    def emit(self, event, session):
        for callback in list(self.callbacks):
            callback(event, session)

    async def _respond(self, result):
        await asyncio.sleep(0)
        if isinstance(result, Exception):
            raise result
        return result

    async def sign_in_with_password(self, email, password):
        self.calls.append(("sign_in_with_password", email, password))
        return await self._respond(self.sign_in_result)

    async def sign_up(self, email, password, full_name):
        self.calls.append(("sign_up", email, password, full_name))
        return await self._respond(self.sign_up_result)

    async def sign_in_with_oauth(self, provider, redirect_to):
        self.calls.append(("sign_in_with_oauth", provider, redirect_to))
        return await self._respond(self.oauth_result)

    def network_calls(self):
        return [call for call in self.calls if call[0] != "get_session"]


class FakeAddressBar:
    def __init__(self, has_fragment=False):
        self.fragment = has_fragment
        self.strip_count = 0

    def has_redirect_fragment(self):
        return self.fragment

    def strip_redirect_fragment(self):
        self.strip_count += 1
        self.fragment = False


class FakeRouter:
    def __init__(self):
        self.paths = []

    def navigate(self, path):
        self.paths.append(path)


class FakeExternalRedirect:
    def __init__(self):
        self.urls = []

    def redirect(self, url):
        self.urls.append(url)


@pytest.fixture
def service():
    return FakeAuthService()


@pytest.fixture
def router():
    return FakeRouter()


@pytest.fixture
def address_bar():
    return FakeAddressBar()


@pytest.fixture
def gate(router, address_bar):
    return NavigationGate(router, address_bar)
