# client/services/books.py

import logging
import os
import requests
from client.errors import ExternalServiceError


logger = logging.getLogger(__name__)

GOOGLE_BOOKS_URL = os.getenv("GOOGLE_BOOKS_URL", "https://www.googleapis.com/books/v1/volumes")
NO_AUTHOR = "No author to display"
REQUEST_TIMEOUT = 10


def to_book(item: dict) -> dict:
    """
    Maps one Google Books volume onto the saved-book shape used by the API.
    """
    info = item.get("volumeInfo") or {}
    return {
        "bookId": item["id"],
        "authors": info.get("authors") or [NO_AUTHOR],
        "title": info.get("title") or "",
        "description": info.get("description") or "",
        "image": (info.get("imageLinks") or {}).get("thumbnail") or "",
        "link": info.get("infoLink") or "",
    }


def search_google_books(query: str) -> list[dict]:
    try:
        res = requests.get(GOOGLE_BOOKS_URL, params={"q": query}, timeout=REQUEST_TIMEOUT)
    except requests.RequestException as e:
        raise ExternalServiceError(f"Book search failed: {e}") from e

    if res.status_code != 200:
        raise ExternalServiceError(f"Book search failed with status {res.status_code}")

    try:
        items = res.json().get("items") or []
    except ValueError as e:
        raise ExternalServiceError("Book search returned an unreadable response") from e
    # untitled volumes cannot be saved
    return [to_book(item) for item in items if item.get("id") and (item.get("volumeInfo") or {}).get("title")]
