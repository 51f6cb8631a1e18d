"""
app.py
SentryWallet wallet client
Entry point.  Handles page registration, routing and logging setup.
"""

import streamlit as st

from sentrywallet.config import load_config
from sentrywallet.observability import setup_observability

st.set_page_config(
    page_title = "SentryWallet",
    page_icon  = "🛡️",
    layout     = "centered",
)

setup_observability(load_config())

# ── Routing ───────────────────────────────────────────────────────────────────
# url paths match the routes used by the login view: /, /login, /dashboard
pages = [
    st.Page("pages/splash.py",    title="SentryWallet", default=True),
    st.Page("pages/login.py",     title="Sign In",      url_path="login"),
    st.Page("pages/dashboard.py", title="Dashboard",    url_path="dashboard"),
]

st.navigation(pages, position="hidden").run()
