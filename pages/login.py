"""
pages/login.py
Sign in / create account page.

Each script run is one activation of the login view: the session probe and
the auth event subscription run first, then the queued user action (if any),
and the page either switches to the dashboard or renders the form.
"""

import asyncio

import streamlit as st

from sentrywallet.browser import (
    StreamlitAddressBar,
    StreamlitExternalRedirect,
    StreamlitRouter,
    inject_fragment_handler,
)
from sentrywallet.config import ConfigError, load_config
from sentrywallet.db import get_supabase_client
from sentrywallet.form import AuthFormController, OAuthInitiator
from sentrywallet.models import AuthMode
from sentrywallet.service import SupabaseAuthService
from sentrywallet.session import activate_login_view

_FORM_KEY = "login_form"
_ACTION_KEY = "login_action"
_FIELD_KEYS = {
    "full_name": "login_full_name",
    "email": "login_email",
    "password": "login_password",
}

config = load_config()
inject_fragment_handler()

try:
    client = get_supabase_client()
except ConfigError as exc:
    st.error(str(exc))
    st.stop()

address_bar = StreamlitAddressBar()
router = StreamlitRouter()
service = SupabaseAuthService(client, redirect=address_bar)

if _FORM_KEY not in st.session_state:
    st.session_state[_FORM_KEY] = AuthFormController(service)
form: AuthFormController = st.session_state[_FORM_KEY]
google = OAuthInitiator(form, service, StreamlitExternalRedirect(), config.login_redirect_url)

# Streamlit drops widget state when the page is left; show what the form holds.
for _name, _key in _FIELD_KEYS.items():
    st.session_state.setdefault(_key, getattr(form.credentials, _name))


# ─── Widget callbacks (run before the script body) ───────────────────────────

def _on_field_change(name: str) -> None:
    form.on_field_change(name, st.session_state[_FIELD_KEYS[name]])


def _queue(action: str) -> None:
    st.session_state[_ACTION_KEY] = action


def _on_toggle_mode() -> None:
    form.toggle_mode()
    for key in _FIELD_KEYS.values():
        st.session_state.pop(key, None)


# ─── Activation ──────────────────────────────────────────────────────────────

async def _activate(action: str | None) -> bool:
    """Return True when the activation is leaving for the dashboard."""
    async with activate_login_view(service, router, address_bar, controllers=[form]) as gate:
        if not gate.fired:
            if action == "submit":
                await form.on_submit()
            elif action == "google":
                await google.on_google_login()
        return gate.fired


pending_action = st.session_state.pop(_ACTION_KEY, None)
form.release_stale_submission()

provider_error = address_bar.redirect_error()
if provider_error:
    google.on_redirect_error(provider_error)
    address_bar.strip_redirect_fragment()

if asyncio.run(_activate(pending_action)):
    # Typed credentials do not outlive the login view.
    st.session_state.pop(_FORM_KEY, None)
    for _key in _FIELD_KEYS.values():
        st.session_state.pop(_key, None)
router.flush()


# ─── Layout ──────────────────────────────────────────────────────────────────

if st.button("← Back"):
    st.switch_page("pages/splash.py")

is_sign_up = form.mode is AuthMode.SIGN_UP
busy = form.state.is_submitting

st.markdown(
    """
    <div style="text-align:center;margin:8px 0 16px;">
      <div style="font-size:3rem;">🛡️</div>
    </div>
    """,
    unsafe_allow_html=True,
)
st.title("Create Account" if is_sign_up else "Sign In")
st.caption(
    "Create your SentryWallet account to get started"
    if is_sign_up
    else "Sign in to your SentryWallet account"
)

if form.state.message:
    st.error(form.state.message)

if is_sign_up:
    st.text_input(
        "Full Name",
        key=_FIELD_KEYS["full_name"],
        placeholder="Enter your full name",
        on_change=_on_field_change,
        args=("full_name",),
    )
st.text_input(
    "Email Address",
    key=_FIELD_KEYS["email"],
    placeholder="Enter your email",
    on_change=_on_field_change,
    args=("email",),
)
st.text_input(
    "Password",
    key=_FIELD_KEYS["password"],
    type="password",
    placeholder="Create a password" if is_sign_up else "Enter your password",
    on_change=_on_field_change,
    args=("password",),
)
if is_sign_up:
    st.caption("Password must be at least 6 characters long")

st.button(
    "Create Account" if is_sign_up else "Sign In",
    type="primary",
    use_container_width=True,
    disabled=busy,
    on_click=_queue,
    args=("submit",),
)

st.markdown("<p style='text-align:center;'>OR</p>", unsafe_allow_html=True)

st.button(
    "Continue with Google",
    use_container_width=True,
    disabled=busy,
    on_click=_queue,
    args=("google",),
)

st.button(
    "Already have an account? Sign In" if is_sign_up else "Don't have an account? Sign Up",
    on_click=_on_toggle_mode,
)

st.caption(
    "🛡️ Your account is secured with industry-standard encryption and social recovery features."
)
st.caption("By continuing, you agree to our Terms of Service and Privacy Policy.")
