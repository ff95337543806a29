"""Login and registration pages."""

from __future__ import annotations

import streamlit as st

from memo_app.errors import ValidationError
from memo_app.validation import parse_login, parse_register
from ui.state import get_context, navigate, run


def _show_field_errors(error: ValidationError) -> None:
    for message in error.field_errors.values():
        st.error(message)


def render_login() -> None:
    """Render the login page."""
    ctx = get_context()
    if ctx.session.is_authenticated:
        navigate("list")
        return

    st.title("📝 Log in")
    st.write("Log in to start writing memos.")

    with st.form("login"):
        username = st.text_input("Username", placeholder="Enter your username")
        password = st.text_input(
            "Password", type="password", placeholder="Enter your password"
        )
        submitted = st.form_submit_button("Log in", type="primary")

    if submitted:
        try:
            credential = parse_login(username, password)
        except ValidationError as e:
            _show_field_errors(e)
        else:
            with st.spinner("Logging in..."):
                ok = run(ctx.session.login(credential))
            if ok:
                navigate("list")
            else:
                st.error("Login failed. Check your username and password.")

    st.write("Don't have an account?")
    if st.button("Create one"):
        navigate("register")


def render_register() -> None:
    """Render the registration page."""
    ctx = get_context()
    if ctx.session.is_authenticated:
        navigate("list")
        return

    st.title("📝 Sign up")
    st.write("Create an account to use the memo service.")

    with st.form("register"):
        username = st.text_input("Username", placeholder="At least 3 characters")
        email = st.text_input("Email", placeholder="you@example.com")
        password = st.text_input(
            "Password", type="password", placeholder="At least 6 characters"
        )
        confirm = st.text_input(
            "Confirm password", type="password", placeholder="Repeat your password"
        )
        submitted = st.form_submit_button("Sign up", type="primary")

    if submitted:
        try:
            profile = parse_register(username, email, password, confirm)
        except ValidationError as e:
            _show_field_errors(e)
        else:
            with st.spinner("Signing up..."):
                ok = run(ctx.session.register(profile))
            if ok:
                navigate("list")
            else:
                st.error("Registration failed. Please try again.")

    st.write("Already have an account?")
    if st.button("Log in instead"):
        navigate("login")
