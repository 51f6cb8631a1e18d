"""
sentrywallet/db.py
Supabase client construction for SentryWallet.
All Supabase clients are created through this module.
"""

import streamlit as st
from supabase import Client, ClientOptions, create_client

from sentrywallet.config import AppConfig, load_config

_CLIENT_KEY = "supabase_client"


def create_supabase_client(config: AppConfig) -> Client:
    """
    Return a new Supabase client authenticated with the anon key.

    The implicit flow is requested so OAuth providers return tokens to the
    login page instead of a code whose verifier would have to survive the
    round trip.  Raises ConfigError when the URL or key is missing.
    """
    url, key = config.require_supabase()
    return create_client(url, key, options=ClientOptions(flow_type="implicit"))


def get_supabase_client() -> Client:
    """
    Return the Supabase client for the current browser session.

    Stored in st.session_state rather than st.cache_resource: Auth state is
    per-session and must not bleed between users.
    """
    if _CLIENT_KEY not in st.session_state:
        st.session_state[_CLIENT_KEY] = create_supabase_client(load_config())
    return st.session_state[_CLIENT_KEY]


def drop_supabase_client() -> None:
    """Forget the session's client so the next call builds a fresh one."""
    st.session_state.pop(_CLIENT_KEY, None)
