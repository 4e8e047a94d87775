# client/ui/saved.py

import logging
import streamlit as st
from client.errors import ApiError
from client.services.api import get_me
from client.ui.search import get_search_page


logger = logging.getLogger(__name__)


def saved_books_page(cookies):
    token = st.session_state.get("access_token")
    page = get_search_page(cookies)

    try:
        user = get_me(token)
    except ApiError as e:
        logger.error("Loading saved books failed (%s): %s", e.code, e.message)
        st.error("❌ Could not load your saved books.")
        return

    if user is None:
        st.error("❌ Could not load your saved books.")
        return

    st.title(f"📚 {user['username']}'s saved books")

    saved_books = user["savedBooks"]
    if not saved_books:
        st.info("You have no saved books!")
        return

    st.subheader(f"Viewing {user['bookCount']} saved {'book' if user['bookCount'] == 1 else 'books'}:")

    columns = st.columns(3)
    for index, book in enumerate(saved_books):
        with columns[index % 3]:
            with st.container(border=True):
                if book.get("image"):
                    st.image(book["image"], caption=f"The cover for {book['title']}")
                st.markdown(f"**{book['title']}**")
                st.caption(f"Authors: {', '.join(book['authors'])}")
                st.write(book.get("description") or "")
                if st.button("Delete this Book!", key=f"delete_{book['bookId']}"):
                    if page.remove(book["bookId"], token):
                        st.rerun()
                    st.error(page.message)
