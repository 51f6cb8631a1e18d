"""
sentrywallet/session.py
Detection of an already-authenticated user while the login view is shown.

Two independent signals can report that the user is signed in:
  - SessionBootstrapper : one get_session() probe when the view activates
                          (also the landing point of an OAuth redirect)
  - AuthEventSubscriber : SIGNED_IN events from the Auth Service

They race.  Both report to the same NavigationGate, which navigates once.

Entry point:
  activate_login_view(service, router, address_bar) -> NavigationGate
    Async context manager owning the subscription for one activation.
"""

import asyncio
import logging
import threading
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Iterable

from sentrywallet.gate import AddressBar, NavigationGate, Router
from sentrywallet.service import SIGNED_IN, AuthService, Subscription

logger = logging.getLogger(__name__)


class SessionBootstrapper:
    """Probe the Auth Service once for an existing session."""

    def __init__(self, service: AuthService, gate: NavigationGate) -> None:
        self._service = service
        self._gate = gate

    async def run(self) -> bool:
        """
        Return True if the probe found a session and navigated.

        A failing probe counts as "no session": the login form stays visible
        and nothing is shown to the user.
        """
        try:
            session = await self._service.get_session()
        except Exception:
            logger.warning("Session probe failed; treating as signed out", exc_info=True)
            return False
        if session is None:
            logger.debug("No existing session")
            return False
        return self._gate.trigger_once(session)


class AuthEventSubscriber:
    """
    Live subscription to Auth Service state changes.

    supabase-py invokes callbacks on whatever thread made the call that
    changed the session, which for SupabaseAuthService is a worker thread.
    Events are therefore handed to the loop that opened the subscription and
    processed there.  Once close() has run, no event reaches the gate, even
    one already queued on the loop.
    """

    def __init__(self, service: AuthService, gate: NavigationGate) -> None:
        self._service = service
        self._gate = gate
        self._subscription: Subscription | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._loop_thread: int | None = None
        self._closed = True

    def open(self) -> None:
        if not self._closed:
            return
        try:
            self._loop = asyncio.get_running_loop()
        except RuntimeError:
            self._loop = None
        self._loop_thread = threading.get_ident()
        self._closed = False
        self._subscription = self._service.on_auth_state_change(self._on_event)

    def close(self) -> None:
        self._closed = True
        subscription, self._subscription = self._subscription, None
        if subscription is not None:
            subscription.unsubscribe()

    def __enter__(self) -> "AuthEventSubscriber":
        self.open()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _on_event(self, event: str, session: Any) -> None:
        if self._closed:
            logger.debug("Dropping %s event delivered after teardown", event)
            return
        if self._loop is None or threading.get_ident() == self._loop_thread:
            self._handle(event, session)
            return
        try:
            self._loop.call_soon_threadsafe(self._handle, event, session)
        except RuntimeError:
            # Loop already closed: the view is gone.
            logger.debug("Dropping %s event, event loop closed", event)

    def _handle(self, event: str, session: Any) -> None:
        if self._closed:
            return
        if str(event) == SIGNED_IN and session is not None:
            self._gate.trigger_once(session)


@asynccontextmanager
async def activate_login_view(
    service: AuthService,
    router: Router,
    address_bar: AddressBar,
    controllers: Iterable[Any] = (),
) -> AsyncIterator[NavigationGate]:
    """
    Run one activation of the login view.

    Opens the event subscription, probes for an existing session and yields
    the activation's NavigationGate.  Each object in controllers gets the
    gate bound as its .gate for the duration.  The subscription is released
    on exit whatever happened inside the block.
    """
    gate = NavigationGate(router, address_bar)
    controllers = list(controllers)
    for controller in controllers:
        controller.gate = gate

    subscriber = AuthEventSubscriber(service, gate)
    subscriber.open()
    try:
        await SessionBootstrapper(service, gate).run()
        yield gate
    finally:
        subscriber.close()
        for controller in controllers:
            controller.gate = None
