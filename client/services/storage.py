# client/services/storage.py

import json
import logging


logger = logging.getLogger(__name__)

SAVED_BOOK_IDS_KEY = "saved_book_ids"


class SavedBookIds:
    """
    Keeps the list of saved book ids in a cookie store so that button
    state survives page reloads.
    `cookies` is any mapping with a `save()` method, such as
    streamlit_cookies_manager's EncryptedCookieManager.
    """

    def __init__(self, cookies):
        self.cookies = cookies

    def load(self) -> list[str]:
        raw = self.cookies.get(SAVED_BOOK_IDS_KEY)
        if not raw:
            return []
        try:
            ids = json.loads(raw)
        except ValueError:
            logger.warning("Discarding unreadable saved book ids cookie")
            return []
        return [str(book_id) for book_id in ids] if isinstance(ids, list) else []

    def save(self, book_ids) -> None:
        self.cookies[SAVED_BOOK_IDS_KEY] = json.dumps(list(book_ids))
        self.cookies.save()

    def clear(self) -> None:
        self.save([])
