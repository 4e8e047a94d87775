# client/state.py

import logging
from dataclasses import dataclass, field
from typing import Callable

from client.errors import ApiError, ExternalServiceError
from client.services import api, books


logger = logging.getLogger(__name__)


@dataclass
class SearchPage:
    """
    State behind the search page: the search box, the last results and
    the ids of books the user has saved.

    Every transition returns True on success. Failures are logged and
    leave the state as it was.
    """
    search_input: str = ""
    searched_books: list = field(default_factory=list)
    saved_book_ids: list = field(default_factory=list)
    message: str = ""

    search: Callable = books.search_google_books
    save_book: Callable = api.save_book
    remove_book: Callable = api.remove_book
    on_saved_ids_changed: Callable | None = None

    def is_saved(self, book_id: str) -> bool:
        return book_id in self.saved_book_ids

    def find(self, book_id: str) -> dict | None:
        return next((book for book in self.searched_books if book["bookId"] == book_id), None)

    def submit(self) -> bool:
        query = self.search_input.strip()
        if not query:
            return False
        try:
            results = self.search(query)
        except ExternalServiceError as e:
            logger.error("Search for %r failed: %s", query, e)
            self.message = "Something went wrong with the search. Please try again."
            return False

        self.searched_books = results
        self.search_input = ""
        self.message = ""
        return True

    def save(self, book_id: str, token: str | None) -> bool:
        if not token:
            return False
        book = self.find(book_id)
        if book is None:
            logger.warning("Cannot save %s: not in the current results", book_id)
            return False
        try:
            self.save_book(book, token)
        except ApiError as e:
            logger.error("Saving book %s failed (%s): %s", book_id, e.code, e.message)
            self.message = f"Could not save the book: {e.message}"
            return False

        if book_id not in self.saved_book_ids:
            self.saved_book_ids = [*self.saved_book_ids, book_id]
        self._saved_ids_changed()
        return True

    def remove(self, book_id: str, token: str | None) -> bool:
        if not token:
            return False
        try:
            self.remove_book(book_id, token)
        except ApiError as e:
            logger.error("Removing book %s failed (%s): %s", book_id, e.code, e.message)
            self.message = f"Could not remove the book: {e.message}"
            return False

        self.saved_book_ids = [saved for saved in self.saved_book_ids if saved != book_id]
        self._saved_ids_changed()
        return True

    def _saved_ids_changed(self):
        self.message = ""
        if self.on_saved_ids_changed is not None:
            self.on_saved_ids_changed(self.saved_book_ids)
