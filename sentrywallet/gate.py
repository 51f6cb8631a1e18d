"""
sentrywallet/gate.py
One-shot navigation from the login view to the dashboard.

The session probe, the auth event stream and the password form can all
decide the user is signed in during the same view activation.  They share
one NavigationGate so the browser is sent to the dashboard exactly once.
"""

import logging
from typing import Any, Protocol

logger = logging.getLogger(__name__)

DASHBOARD_PATH = "/dashboard"


class AddressBar(Protocol):
    def has_redirect_fragment(self) -> bool: ...

    def strip_redirect_fragment(self) -> None:
        """Remove OAuth artefacts from the URL without adding a history entry."""


class Router(Protocol):
    def navigate(self, path: str) -> None: ...


class NavigationGate:
    """Single-use latch in front of the router.  Create one per view activation."""

    def __init__(self, router: Router, address_bar: AddressBar) -> None:
        self._router = router
        self._address_bar = address_bar
        self._fired = False

    @property
    def fired(self) -> bool:
        return self._fired

    def trigger_once(self, session: Any = None) -> bool:
        """
        Navigate to the dashboard unless this gate already did.

        Returns True when this call performed the navigation.  The latch is
        set before any side effect so a re-entrant call from the router or
        the address bar cannot navigate twice.
        """
        if self._fired:
            logger.debug("Navigation already triggered for this activation")
            return False
        self._fired = True

        if self._address_bar.has_redirect_fragment():
            self._address_bar.strip_redirect_fragment()
        logger.info("Navigating to %s", DASHBOARD_PATH)
        self._router.navigate(DASHBOARD_PATH)
        return True
