"""
Profile page for the signed-in admin.
"""

import streamlit as st

from ...core.dates import format_timestamp
from ...core.utils import display_phone_number, format_phone_number, parse_timestamp
from ...data.profile import store_display_name
from ..components import show_query_error
from ..hooks import QueryHooks


def render_profile(hooks: QueryHooks):
    st.header("Profile")

    result = hooks.current_admin()
    if result.is_error:
        show_query_error(result.error, "profile")
        return

    admin = result.data
    st.markdown(
        f"**{admin.full_name or 'Admin'}** · {admin.role.capitalize()} at "
        f"**{store_display_name(admin)}**"
    )
    joined = format_timestamp(parse_timestamp(admin.created_at))
    if joined:
        st.caption(f"Member since {joined}")

    with st.form("profile"):
        full_name = st.text_input("Full name", value=admin.full_name)
        phone = st.text_input("Phone number", value=display_phone_number(admin.phone_number or ""))
        email = st.text_input("Email", value=admin.email or "")
        submitted = st.form_submit_button("Save profile")

    if not submitted:
        return

    updates = {
        "full_name": full_name.strip(),
        "phone_number": format_phone_number(phone.strip()) or None,
        "email": email.strip() or None,
    }
    try:
        hooks.update_profile(updates)
    except Exception as e:
        st.error(f"Could not update profile: {e}")
    else:
        st.rerun()
