# client/services/api.py

import logging
import os
import requests
from client.errors import ApiError


logger = logging.getLogger(__name__)

# GraphQL endpoint of the Bookshelf server
API_URL = os.getenv("BOOKSHELF_API_URL", "http://localhost:3001/graphql")
REQUEST_TIMEOUT = 10


# -------------------------------
# GraphQL documents
# -------------------------------

USER_FIELDS = """
    id
    username
    email
    bookCount
    savedBooks {
      bookId
      authors
      title
      description
      image
      link
    }
"""

QUERY_ME = f"""
query me {{
  me {{ {USER_FIELDS} }}
}}
"""

ADD_USER = f"""
mutation addUser($username: String!, $email: String!, $password: String!) {{
  addUser(username: $username, email: $email, password: $password) {{
    token
    user {{ {USER_FIELDS} }}
  }}
}}
"""

LOGIN_USER = f"""
mutation login($email: String!, $password: String!) {{
  login(email: $email, password: $password) {{
    token
    user {{ {USER_FIELDS} }}
  }}
}}
"""

SAVE_BOOK = f"""
mutation saveBook($bookData: BookInput!) {{
  saveBook(bookData: $bookData) {{ {USER_FIELDS} }}
}}
"""

REMOVE_BOOK = f"""
mutation removeBook($bookId: String!) {{
  removeBook(bookId: $bookId) {{ {USER_FIELDS} }}
}}
"""


def execute(query: str, variables: dict | None = None, token: str | None = None) -> dict:
    """
    Posts a GraphQL document and returns its `data`.
    Raises ApiError for transport failures and for any GraphQL error.
    """
    headers = {"Content-Type": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"

    try:
        res = requests.post(
            API_URL,
            json={"query": query, "variables": variables or {}},
            headers=headers,
            timeout=REQUEST_TIMEOUT,
        )
    except requests.RequestException as e:
        raise ApiError(f"Could not reach the server: {e}") from e

    try:
        body = res.json()
    except ValueError as e:
        raise ApiError(f"Unexpected response from the server (status {res.status_code})") from e

    errors = body.get("errors")
    if errors:
        first = errors[0]
        code = (first.get("extensions") or {}).get("code", "GRAPHQL_ERROR")
        raise ApiError(first.get("message", "Request failed"), code=code)

    return body.get("data") or {}


# -------------------------------
# Authentication
# -------------------------------

def add_user(username: str, email: str, password: str) -> dict:
    """
    Registers a user. Returns {"token", "user"}.
    """
    data = execute(ADD_USER, {"username": username, "email": email, "password": password})
    return data["addUser"]


def login_user(email: str, password: str) -> dict:
    """
    Logs in and returns {"token", "user"}.
    """
    data = execute(LOGIN_USER, {"email": email, "password": password})
    return data["login"]


def get_me(token: str) -> dict:
    return execute(QUERY_ME, token=token)["me"]


# -------------------------------
# Saved books
# -------------------------------

def save_book(book: dict, token: str) -> dict:
    data = execute(SAVE_BOOK, {"bookData": book}, token=token)
    return data["saveBook"]


def remove_book(book_id: str, token: str) -> dict:
    data = execute(REMOVE_BOOK, {"bookId": book_id}, token=token)
    return data["removeBook"]
