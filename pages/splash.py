"""
pages/splash.py
Loading screen shown at the root URL.  Moves on to the dashboard after a
short delay; the dashboard's guard sends signed-out visitors to login.
"""

import time

import streamlit as st

from sentrywallet.config import load_config

config = load_config()

st.markdown(
    """
    <div style="display:flex;flex-direction:column;align-items:center;
                justify-content:center;min-height:60vh;text-align:center;">
      <div style="font-size:5rem;margin-bottom:24px;">🛡️</div>
      <h1 style="margin:0;font-size:2.25rem;font-weight:700;">SentryWallet</h1>
      <p style="margin:12px 0 0;color:#93C5FD;font-size:1.2rem;">
        Securing your assets...
      </p>
    </div>
    """,
    unsafe_allow_html=True,
)

with st.spinner(""):
    time.sleep(config.splash_delay_seconds)

st.switch_page("pages/dashboard.py")
