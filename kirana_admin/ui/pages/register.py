"""
Store registration for a signed-in user without a store.
"""

import streamlit as st

from ...core.config import APP_NAME
from ...core.utils import display_phone_number, format_phone_number, is_valid_indian_phone
from ...data.registration import complete_registration


def render_register(client, user) -> bool:
    """
    Render the store setup form.

    Returns:
        True once registration succeeded
    """
    st.title(f"Welcome to {APP_NAME}")
    st.markdown("Set up your store to get started.")

    user_phone = format_phone_number(getattr(user, "phone", "") or "")
    if user_phone:
        st.caption(f"Signed in as {display_phone_number(user_phone)}")

    with st.form("register"):
        st.subheader("Your details")
        full_name = st.text_input("Full name")
        email = st.text_input("Email (optional)", value=getattr(user, "email", "") or "")

        st.subheader("Store details")
        store_name = st.text_input("Store name")
        store_address = st.text_area("Store address")
        store_phone = st.text_input("Store contact number", value=display_phone_number(user_phone))

        submitted = st.form_submit_button("Create store", type="primary")

    if not submitted:
        return False

    missing = [
        label for label, value in (
            ("full name", full_name),
            ("store name", store_name),
            ("store address", store_address),
        )
        if not value.strip()
    ]
    if missing:
        st.error(f"Please enter your {', '.join(missing)}")
        return False
    if not is_valid_indian_phone(store_phone):
        st.error("Enter a valid 10 digit store contact number")
        return False

    with st.spinner("Creating your store..."):
        response = complete_registration(
            client,
            user_id=user.id,
            phone_number=user_phone or None,
            full_name=full_name.strip(),
            store_name=store_name.strip(),
            store_address=store_address.strip(),
            store_phone=format_phone_number(store_phone),
            email=email.strip() or None,
        )

    if not response.success:
        st.error(response.error)
        return False

    st.session_state["registered"] = True
    st.toast("Store created successfully!", icon="🎉")
    return True
