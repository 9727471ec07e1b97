"""Authentication screens for login and registration."""
import time

import streamlit as st

from src.application.ports import IdentityPort
from src.infrastructure.auth.validators import (
    validate_email,
    validate_password,
    validate_name,
    validate_phone,
    passwords_match,
)
from src.presentation.context import SESSION_KEYS


def show_login_screen(identity: IdentityPort) -> bool:
    """
    Display login screen.

    Returns:
        True if user successfully logged in, False otherwise
    """
    st.markdown("# 🔐 Login")
    st.markdown("Sign in to find Ayurvedic doctors near you and manage your appointments.")

    with st.form("login_form"):
        email = st.text_input("Email", placeholder="your.email@example.com")
        password = st.text_input("Password", type="password", placeholder="Enter your password")

        col1, col2 = st.columns([1, 1])
        with col1:
            submit = st.form_submit_button("Login", use_container_width=True)
        with col2:
            register_btn = st.form_submit_button("Need an account? Register", use_container_width=True)

        if register_btn:
            st.session_state.auth_mode = "register"
            st.rerun()

        if submit:
            if not email or not password:
                st.error("❌ Please enter both email and password")
                return False

            email_valid, email_error = validate_email(email)
            if not email_valid:
                st.error(f"❌ {email_error}")
                return False

            success, claims = identity.authenticate_user(email, password)
            if success:
                st.session_state.authenticated = True
                st.session_state.user_data = claims
                st.session_state.current_page = "home"
                st.success(f"✅ Welcome back, {claims['full_name'] or claims['email']}!")
                st.rerun()
                return True

            st.error("❌ Invalid email or password")
            return False

    return False


def collect_registration_errors(
    full_name: str, email: str, phone: str, password: str, confirm_password: str
) -> list:
    errors = []
    for valid, error in (
        validate_name(full_name, "Full name"),
        validate_email(email),
        validate_phone(phone),
    ):
        if not valid:
            errors.append(error)

    password_valid, password_error = validate_password(password)
    if not password_valid:
        errors.append(password_error)
    else:
        match_valid, match_error = passwords_match(password, confirm_password)
        if not match_valid:
            errors.append(match_error)
    return errors


def show_register_screen(identity: IdentityPort) -> bool:
    """
    Display registration screen.

    Returns:
        True if user successfully registered, False otherwise
    """
    st.markdown("# ✍️ Register")
    st.markdown("Create an Ayur-Find account.")

    with st.form("register_form"):
        full_name = st.text_input("Full Name", placeholder="Ayush Sharma")
        email = st.text_input("Email", placeholder="your.email@example.com")
        phone = st.text_input("Phone Number", placeholder="+91 98450 00000")
        password = st.text_input("Password", type="password", placeholder="Enter a strong password")
        confirm_password = st.text_input("Confirm Password", type="password", placeholder="Re-enter your password")

        st.caption("Password must be at least 8 characters and include uppercase, lowercase, number, and special character.")

        col1, col2 = st.columns([1, 1])
        with col1:
            submit = st.form_submit_button("Register", use_container_width=True)
        with col2:
            login_btn = st.form_submit_button("Already have an account? Login", use_container_width=True)

        if login_btn:
            st.session_state.auth_mode = "login"
            st.rerun()

        if submit:
            errors = collect_registration_errors(full_name, email, phone, password, confirm_password)
            if errors:
                for error in errors:
                    st.error(f"❌ {error}")
                return False

            success, message = identity.register_user(
                full_name=full_name,
                email=email,
                phone=phone,
                password=password,
            )
            if success:
                st.success(f"✅ {message}! Please login to continue.")
                st.info("Redirecting to login page in 2 seconds...")
                st.session_state.auth_mode = "login"
                time.sleep(2)
                st.rerun()
                return True

            st.error(f"❌ {message}")
            return False

    return False


def show_auth_screen(identity: IdentityPort) -> bool:
    """
    Display the login or registration screen depending on session state.

    Returns:
        True if user is authenticated, False otherwise
    """
    if "auth_mode" not in st.session_state:
        st.session_state.auth_mode = "login"

    if st.session_state.get("authenticated", False):
        return True

    if st.session_state.auth_mode == "register":
        return show_register_screen(identity)
    return show_login_screen(identity)


def logout():
    """Logout current user and drop their navigation and location state."""
    st.session_state.authenticated = False
    st.session_state.user_data = None
    st.session_state.auth_mode = "login"
    for key in SESSION_KEYS:
        if key in st.session_state:
            del st.session_state[key]
    st.rerun()
