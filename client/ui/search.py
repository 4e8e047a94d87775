# client/ui/search.py

import streamlit as st
from client.services.storage import SavedBookIds
from client.state import SearchPage


def get_search_page(cookies) -> SearchPage:
    """
    The search page state for this browser session, created on first use
    with the saved ids remembered in cookies.
    """
    if "search_page" not in st.session_state:
        store = SavedBookIds(cookies)
        st.session_state["search_page"] = SearchPage(
            saved_book_ids=store.load(),
            on_saved_ids_changed=store.save,
        )
    return st.session_state["search_page"]


def search_page(cookies):
    page = get_search_page(cookies)
    token = st.session_state.get("access_token")

    st.title("🔎 Search for Books!")

    with st.form("search_form", clear_on_submit=True):
        page.search_input = st.text_input("Search for a book", value=page.search_input)
        submitted = st.form_submit_button("Submit Search")

    if submitted:
        with st.spinner("Searching..."):
            page.submit()

    if page.message:
        st.warning(page.message)

    if page.searched_books:
        st.subheader(f"Viewing {len(page.searched_books)} results:")
    else:
        st.subheader("Search for a book to begin")

    columns = st.columns(3)
    for index, book in enumerate(page.searched_books):
        with columns[index % 3]:
            render_book(page, book, token)


def render_book(page: SearchPage, book: dict, token: str | None):
    with st.container(border=True):
        if book["image"]:
            st.image(book["image"], caption=f"The cover for {book['title']}")
        st.markdown(f"**{book['title']}**")
        st.caption(f"Authors: {', '.join(book['authors'])}")
        st.write(book["description"])

        if not token:
            return

        saved = page.is_saved(book["bookId"])
        label = "This book has already been saved!" if saved else "Save this Book!"
        if st.button(label, key=f"save_{book['bookId']}", disabled=saved):
            if page.save(book["bookId"], token):
                st.rerun()
        if st.button("Remove Book", key=f"remove_{book['bookId']}"):
            if page.remove(book["bookId"], token):
                st.rerun()
