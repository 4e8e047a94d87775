# client/main.py

import logging
import os
import streamlit as st
from dotenv import load_dotenv
from streamlit_cookies_manager import EncryptedCookieManager
from client.services.storage import SavedBookIds
from client.ui.login import login_page, logout, restore_session
from client.ui.saved import saved_books_page
from client.ui.search import search_page


load_dotenv()
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))


st.set_page_config(page_title="Google Books Search", layout="wide")

cookies = EncryptedCookieManager(prefix="bookshelf/", password=os.getenv("COOKIE_PASSWORD"))
if not cookies.ready():
    st.stop()

restore_session(cookies)


def navigation():
    st.sidebar.markdown("## 📋 Menu")

    if st.sidebar.button("🔎 Search for Books"):
        st.session_state["page"] = "search"

    if "access_token" in st.session_state:
        st.sidebar.caption(f"Signed in as {st.session_state.get('username', '')}")
        if st.sidebar.button("📚 See Your Books"):
            st.session_state["page"] = "saved"
        if st.sidebar.button("🔓 Logout"):
            logout(cookies)
            SavedBookIds(cookies).clear()
            st.session_state.clear()
            st.rerun()
    elif st.sidebar.button("🔐 Login/Sign Up"):
        st.session_state["page"] = "login"


navigation()

page = st.session_state.get("page", "search")
if page == "login" and "access_token" not in st.session_state:
    login_page(cookies)
elif page == "saved" and "access_token" in st.session_state:
    saved_books_page(cookies)
else:
    search_page(cookies)
