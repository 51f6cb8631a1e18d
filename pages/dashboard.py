"""
pages/dashboard.py
Wallet dashboard shell.  Only reachable with an active session.
"""

import html

import streamlit as st

from sentrywallet.auth import get_current_user, get_display_name, logout, require_auth

# ─── Auth guard ───────────────────────────────────────────────────────────────

require_auth()

user = get_current_user()

# ─── Page header ─────────────────────────────────────────────────────────────

st.markdown(
    f"""
    <div style="margin-bottom:8px;">
      <h1 style="margin:0;font-size:2rem;font-weight:700;">Dashboard</h1>
      <p style="margin:4px 0 0;color:#888;font-size:0.95rem;">
        Welcome back, {html.escape(get_display_name(user))}
      </p>
    </div>
    """,
    unsafe_allow_html=True,
)

with st.sidebar:
    st.caption(getattr(user, "email", ""))
    if st.button("Sign Out", key="sidebar_signout_dashboard"):
        logout()

st.divider()
st.info("Your wallet overview will appear here.")
