"""
Authentication for the Kiranawala Admin Panel.

The Supabase client is kept in session state: it carries the signed-in
user's auth session, so it must never be shared between browser sessions.
"""

import logging
from typing import Optional

import streamlit as st

from ..core.config import APP_DESCRIPTION, APP_NAME, AppConfig
from ..core.utils import is_valid_indian_phone
from ..data import auth
from ..data.client import get_current_user, get_supabase_client
from ..data.registration import check_registration_complete

logger = logging.getLogger(__name__)

CLIENT_KEY = "supabase_client"
OTP_PHONE_KEY = "otp_phone"
FEED_KEY = "realtime_feed"


def get_client(config: Optional[AppConfig] = None):
    """Return this session's Supabase client, creating it on first use."""
    if CLIENT_KEY not in st.session_state:
        st.session_state[CLIENT_KEY] = get_supabase_client(config)
    return st.session_state[CLIENT_KEY]


def current_user():
    return get_current_user(get_client())


def is_registered(user) -> bool:
    """Registration state is cached for the session once it is true."""
    if st.session_state.get("registered"):
        return True
    registered = check_registration_complete(get_client(), user.id)
    if registered:
        st.session_state["registered"] = True
    return registered


def check_login() -> bool:
    """
    Returns True if a Supabase user is signed in.

    Otherwise renders the login form (phone OTP or email/password) and
    returns False.
    """
    if current_user():
        return True

    st.title(APP_NAME)
    st.caption(APP_DESCRIPTION)

    phone_tab, email_tab = st.tabs(["📱 Phone", "✉️ Email"])

    with phone_tab:
        _render_otp_login()

    with email_tab:
        _render_password_login()

    return False


def _render_otp_login() -> None:
    client = get_client()
    pending_phone = st.session_state.get(OTP_PHONE_KEY)

    if not pending_phone:
        phone = st.text_input("Phone number", placeholder="98765 43210", key="login_phone")
        if st.button("Send OTP", key="send_otp"):
            if not is_valid_indian_phone(phone):
                st.error("Enter a valid 10 digit mobile number")
                return
            try:
                st.session_state[OTP_PHONE_KEY] = auth.send_otp(client, phone)
            except Exception as e:
                logger.error("Sending OTP failed: %s", e)
                st.error(f"Could not send OTP: {e}")
            else:
                st.rerun()
        return

    st.info(f"Code sent to {pending_phone}")
    code = st.text_input("Enter OTP", max_chars=6, key="login_otp")
    col1, col2 = st.columns(2)
    with col1:
        if st.button("Verify", key="verify_otp", type="primary"):
            try:
                auth.verify_otp(client, pending_phone, code.strip())
            except Exception as e:
                logger.warning("OTP verification failed for %s: %s", pending_phone, e)
                st.error("Invalid or expired code")
            else:
                del st.session_state[OTP_PHONE_KEY]
                st.rerun()
    with col2:
        if st.button("Change number", key="change_phone"):
            del st.session_state[OTP_PHONE_KEY]
            st.rerun()


def _render_password_login() -> None:
    with st.form("password_login"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign in")

    if submitted:
        try:
            auth.sign_in_with_password(get_client(), email, password)
        except Exception as e:
            logger.warning("Password sign-in failed for %s: %s", email, e)
            st.error("Incorrect email or password")
        else:
            st.rerun()


def logout():
    """Sign out, stop the order feed and clear session state."""
    feed = st.session_state.get(FEED_KEY)
    if feed is not None:
        feed.stop()

    if CLIENT_KEY in st.session_state:
        auth.sign_out(st.session_state[CLIENT_KEY])

    st.session_state.clear()
    st.rerun()
