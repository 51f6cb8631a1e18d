"""
sentrywallet/browser.py
Streamlit implementations of the browser capabilities the login view uses:
the address bar, the page router and the off-site redirect.

Streamlit's Python side never sees the URL hash.  OAuth providers using the
implicit flow return tokens in the hash, so inject_fragment_handler() moves
them into the query string with location.replace (no history entry).  From
then on the query parameters are the "redirect fragment".
"""

import json
import logging

import streamlit as st
import streamlit.components.v1 as components

logger = logging.getLogger(__name__)

# Query parameters an OAuth return trip may leave behind.
REDIRECT_PARAMS = (
    "access_token",
    "refresh_token",
    "expires_at",
    "expires_in",
    "token_type",
    "type",
    "provider_token",
    "provider_refresh_token",
    "code",
    "error",
    "error_code",
    "error_description",
)

PAGE_FOR_PATH = {
    "/": "pages/splash.py",
    "/login": "pages/login.py",
    "/dashboard": "pages/dashboard.py",
}

_PENDING_ROUTE_KEY = "pending_route"
_CONSUMED_REDIRECT_KEY = "consumed_redirect_params"


# ─── Address bar ─────────────────────────────────────────────────────────────

class StreamlitAddressBar:
    """
    Reads and cleans OAuth artefacts in st.query_params.

    Writing to st.query_params makes the frontend push a history entry, so
    the strip rewrites the parent URL with history.replaceState and only
    records server-side that the current parameters were consumed.  The
    server copy is reset by the next st.switch_page.
    """

    def _redirect_params(self) -> dict[str, str]:
        params = {key: st.query_params[key] for key in REDIRECT_PARAMS if key in st.query_params}
        if params and params == st.session_state.get(_CONSUMED_REDIRECT_KEY):
            return {}
        return params

    def has_redirect_fragment(self) -> bool:
        return bool(self._redirect_params())

    def strip_redirect_fragment(self) -> None:
        params = self._redirect_params()
        if params:
            st.session_state[_CONSUMED_REDIRECT_KEY] = params
        components.html(
            "<script>"
            "var l=window.parent.location;"
            "var p=new URLSearchParams(l.search);"
            f"{json.dumps(list(REDIRECT_PARAMS))}.forEach(function(k){{p.delete(k);}});"
            "var s=p.toString();"
            "window.parent.history.replaceState("
            "window.parent.history.state,window.parent.document.title,"
            "l.pathname+(s?'?'+s:''));"
            "</script>",
            height=0,
        )
        logger.debug("Stripped OAuth redirect parameters from the address bar")

    def redirect_tokens(self) -> tuple[str, str] | None:
        """Return (access_token, refresh_token) from an OAuth return trip, if any."""
        params = self._redirect_params()
        access_token = params.get("access_token")
        refresh_token = params.get("refresh_token")
        if access_token and refresh_token:
            return access_token, refresh_token
        return None

    def redirect_error(self) -> str | None:
        """Provider-reported failure on the return trip, e.g. a cancelled consent screen."""
        params = self._redirect_params()
        return params.get("error_description") or params.get("error")


def inject_fragment_handler() -> None:
    """
    Move '#access_token=...' from the parent page's hash into its query string.

    Runs inside a same-origin component iframe.  Does nothing when the hash
    holds no tokens.
    """
    components.html(
        "<script>"
        "var h=window.parent.location.hash;"
        "if(h&&(h.indexOf('access_token=')>=0||h.indexOf('error=')>=0)){"
        "var l=window.parent.location;"
        "var q=l.search?l.search+'&'+h.substring(1):'?'+h.substring(1);"
        "l.replace(l.pathname+q);"
        "}"
        "</script>",
        height=0,
    )


# ─── Routing ─────────────────────────────────────────────────────────────────

class StreamlitRouter:
    """
    Records the target route and switches page when flush() is called.

    st.switch_page stops the script by raising, so it must not run inside
    Auth Service callbacks or the form controller.  Pages call flush() as
    the last statement of the script run.
    """

    def navigate(self, path: str) -> None:
        if path not in PAGE_FOR_PATH:
            raise ValueError(f"Unknown route: {path!r}")
        st.session_state[_PENDING_ROUTE_KEY] = path

    def flush(self) -> None:
        path = st.session_state.pop(_PENDING_ROUTE_KEY, None)
        if path is not None:
            st.switch_page(PAGE_FOR_PATH[path])


class StreamlitExternalRedirect:
    """Sends the top-level window to an off-site URL."""

    def redirect(self, url: str) -> None:
        components.html(
            f"<script>window.top.location.href={json.dumps(url)};</script>",
            height=0,
        )
        st.caption(f"Redirecting to the sign-in provider… [Continue manually]({url})")
