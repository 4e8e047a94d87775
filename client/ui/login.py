# client/ui/login.py

import streamlit as st
from client.errors import ApiError
from client.services.api import add_user, login_user
from client.services.storage import SavedBookIds


def restore_session(cookies):
    """
    Copies a login remembered in cookies into the session state.
    """
    if "access_token" not in st.session_state and cookies.get("access_token"):
        st.session_state["access_token"] = cookies["access_token"]
        st.session_state["username"] = cookies.get("username", "")


def logout(cookies):
    for key in ("access_token", "username"):
        if key in cookies:
            del cookies[key]
    cookies.save()


def _remember(cookies, result):
    st.session_state["access_token"] = result["token"]
    st.session_state["username"] = result["user"]["username"]
    cookies["access_token"] = result["token"]
    cookies["username"] = result["user"]["username"]
    cookies.save()

    # button state follows what the account has already saved
    SavedBookIds(cookies).save(book["bookId"] for book in result["user"]["savedBooks"])
    st.session_state.pop("search_page", None)


def login_page(cookies):
    st.title("🔐 Login")

    if "show_register" not in st.session_state:
        st.session_state["show_register"] = False

    if st.session_state["show_register"]:
        show_register_form(cookies)
    else:
        show_login_form(cookies)


def show_login_form(cookies):
    with st.form("login_form"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Login")

    if submitted:
        with st.spinner("Logging in..."):
            try:
                result = login_user(email, password)
            except ApiError as e:
                st.error(f"❌ Login failed: {e.message}")
            else:
                _remember(cookies, result)
                st.success("✅ Logged in!")
                st.rerun()

    if st.button("Sign up"):
        st.session_state["show_register"] = True
        st.rerun()


def show_register_form(cookies):
    st.subheader("📝 Sign up")

    with st.form("register_form"):
        username = st.text_input("Username")
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Create account")

    if submitted:
        with st.spinner("Creating your account..."):
            try:
                result = add_user(username, email, password)
            except ApiError as e:
                st.error(f"❌ Sign up failed: {e.message}")
            else:
                _remember(cookies, result)
                st.session_state["show_register"] = False
                st.success("🎉 Welcome aboard!")
                st.rerun()

    if st.button("← Back to login"):
        st.session_state["show_register"] = False
        st.rerun()
