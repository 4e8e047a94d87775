"""End-to-end tests for the GraphQL endpoint."""
from __future__ import annotations

import asyncio
from datetime import timedelta

import pytest

from server.config import get_settings
from server.core.auth import sign_token, verify_token
from server.database import SessionLocal
from server.errors import ConfigurationError
from server.models import User


USER_FIELDS = "id username email bookCount savedBooks { bookId title authors description image link }"

ADD_USER = f"""
mutation ($username: String!, $email: String!, $password: String!) {{
  addUser(username: $username, email: $email, password: $password) {{ token user {{ {USER_FIELDS} }} }}
}}
"""

LOGIN = f"""
mutation ($email: String!, $password: String!) {{
  login(email: $email, password: $password) {{ token user {{ {USER_FIELDS} }} }}
}}
"""

ME = f"query {{ me {{ {USER_FIELDS} }} }}"

SAVE_BOOK = f"""
mutation ($bookData: BookInput!) {{
  saveBook(bookData: $bookData) {{ {USER_FIELDS} }}
}}
"""

REMOVE_BOOK = f"""
mutation ($bookId: String!) {{
  removeBook(bookId: $bookId) {{ {USER_FIELDS} }}
}}
"""


def _error_code(body: dict) -> str:
    assert body.get("errors"), body
    return body["errors"][0]["extensions"]["code"]


@pytest.fixture
def register(gql):
    def run(username="alice", email="alice@x.com", password="pw123") -> dict:
        body = gql(ADD_USER, {"username": username, "email": email, "password": password})
        assert "errors" not in body, body
        return body["data"]["addUser"]

    return run


def test_register_login_save_and_remove_book(gql, register):
    register("alice", "alice@x.com", "pw123")

    login = gql(LOGIN, {"email": "alice@x.com", "password": "pw123"})["data"]["login"]
    token = login["token"]

    saved = gql(SAVE_BOOK, {"bookData": {"bookId": "b1", "title": "Foo", "authors": ["A"]}}, token=token)
    user = saved["data"]["saveBook"]
    assert [book["bookId"] for book in user["savedBooks"]] == ["b1"]
    assert user["savedBooks"][0] == {
        "bookId": "b1",
        "title": "Foo",
        "authors": ["A"],
        "description": None,
        "image": None,
        "link": None,
    }
    assert user["bookCount"] == 1

    removed = gql(REMOVE_BOOK, {"bookId": "b1"}, token=token)
    assert removed["data"]["removeBook"]["savedBooks"] == []
    assert removed["data"]["removeBook"]["bookCount"] == 0


def test_login_token_decodes_to_registered_identity(gql, register):
    registered = register("alice", "alice@x.com", "pw123")

    login = gql(LOGIN, {"email": "alice@x.com", "password": "pw123"})["data"]["login"]
    claims = verify_token(login["token"])

    assert claims.username == "alice"
    assert claims.email == "alice@x.com"
    assert str(claims.user_id) == registered["user"]["id"]
    assert login["user"]["username"] == "alice"


def test_add_user_returns_usable_token(gql, register):
    token = register()["token"]

    me = gql(ME, token=token)["data"]["me"]

    assert me["username"] == "alice"
    assert me["savedBooks"] == []


def test_login_failures_do_not_reveal_which_credential_was_wrong(gql, register):
    register("alice", "alice@x.com", "pw123")

    wrong_password = gql(LOGIN, {"email": "alice@x.com", "password": "nope"})
    unknown_email = gql(LOGIN, {"email": "nobody@x.com", "password": "pw123"})

    assert _error_code(wrong_password) == "UNAUTHENTICATED"
    assert _error_code(unknown_email) == "UNAUTHENTICATED"
    assert wrong_password["errors"][0]["message"] == unknown_email["errors"][0]["message"]
    assert wrong_password["data"]["login"] is None


def test_duplicate_registration_is_bad_user_input(gql, register):
    register("alice", "alice@x.com", "pw123")

    body = gql(ADD_USER, {"username": "alice", "email": "other@x.com", "password": "pw"})

    assert _error_code(body) == "BAD_USER_INPUT"


def test_invalid_email_is_bad_user_input(gql):
    body = gql(ADD_USER, {"username": "alice", "email": "alice", "password": "pw"})

    assert _error_code(body) == "BAD_USER_INPUT"


def test_me_requires_authentication(gql):
    body = gql(ME)

    assert _error_code(body) == "UNAUTHENTICATED"
    assert body["data"]["me"] is None


@pytest.mark.parametrize("token", ["garbage", "a.b.c"])
def test_invalid_token_degrades_to_anonymous(gql, token):
    body = gql(ME, token=token)

    assert _error_code(body) == "UNAUTHENTICATED"


def test_expired_token_degrades_to_anonymous(gql, register):
    user = register()["user"]
    expired = sign_token(user["username"], user["email"], int(user["id"]), expires_delta=timedelta(seconds=-1))

    body = gql(ME, token=expired)

    assert _error_code(body) == "UNAUTHENTICATED"


def test_non_bearer_authorization_is_anonymous(client, register):
    token = register()["token"]

    response = client.post("/graphql", json={"query": ME}, headers={"Authorization": f"Basic {token}"})

    assert response.json()["errors"][0]["extensions"]["code"] == "UNAUTHENTICATED"


def test_me_for_deleted_user_is_not_found(gql, register):
    registered = register()
    with SessionLocal() as session:
        session.delete(session.get(User, int(registered["user"]["id"])))
        session.commit()

    body = gql(ME, token=registered["token"])

    assert _error_code(body) == "NOT_FOUND"


def test_save_book_for_deleted_user_is_not_found(gql, register):
    registered = register()
    with SessionLocal() as session:
        session.delete(session.get(User, int(registered["user"]["id"])))
        session.commit()

    body = gql(SAVE_BOOK, {"bookData": {"bookId": "b1", "title": "Foo"}}, token=registered["token"])

    assert _error_code(body) == "NOT_FOUND"


def test_save_book_is_idempotent(gql, register):
    token = register()["token"]
    book = {"bookId": "b1", "title": "Foo", "authors": ["A"]}

    gql(SAVE_BOOK, {"bookData": book}, token=token)
    user = gql(SAVE_BOOK, {"bookData": book}, token=token)["data"]["saveBook"]

    assert [saved["bookId"] for saved in user["savedBooks"]] == ["b1"]
    assert user["bookCount"] == 1


def test_remove_unsaved_book_is_a_no_op(gql, register):
    token = register()["token"]
    gql(SAVE_BOOK, {"bookData": {"bookId": "b1", "title": "Foo"}}, token=token)

    body = gql(REMOVE_BOOK, {"bookId": "not-saved"}, token=token)

    assert "errors" not in body
    assert [saved["bookId"] for saved in body["data"]["removeBook"]["savedBooks"]] == ["b1"]


@pytest.mark.parametrize(
    "query,variables",
    [
        (SAVE_BOOK, {"bookData": {"bookId": "b1", "title": "Foo"}}),
        (REMOVE_BOOK, {"bookId": "b1"}),
    ],
)
def test_book_mutations_require_authentication(gql, query, variables):
    body = gql(query, variables)

    assert _error_code(body) == "UNAUTHENTICATED"


def test_save_book_with_blank_title_is_bad_user_input(gql, register):
    token = register()["token"]

    body = gql(SAVE_BOOK, {"bookData": {"bookId": "b1", "title": "  "}}, token=token)

    assert _error_code(body) == "BAD_USER_INPUT"


def test_cors_allows_configured_origin_with_credentials(client):
    response = client.options(
        "/graphql",
        headers={
            "Origin": "http://localhost:8501",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "authorization,content-type",
        },
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://localhost:8501"
    assert response.headers["access-control-allow-credentials"] == "true"


def test_create_app_requires_jwt_secret(monkeypatch):
    from server.main import create_app

    monkeypatch.delenv("JWT_SECRET_KEY", raising=False)
    get_settings.cache_clear()

    with pytest.raises(ConfigurationError):
        create_app()


def test_store_work_runs_off_the_event_loop(gql, monkeypatch):
    from server.core import users

    seen = []
    hash_password = users.get_password_hash

    def recording_hash(password):
        try:
            asyncio.get_running_loop()
            seen.append("event loop")
        except RuntimeError:
            seen.append("worker thread")
        return hash_password(password)

    monkeypatch.setattr(users, "get_password_hash", recording_hash)

    body = gql(ADD_USER, {"username": "alice", "email": "alice@x.com", "password": "pw123"})

    assert "errors" not in body, body
    assert seen == ["worker thread"]


def _break_user_lookup(monkeypatch):
    from server.core import users

    def fail(db, user_id):
        raise RuntimeError("db down")

    monkeypatch.setattr(users, "find_user_by_id", fail)


def test_unexpected_errors_are_masked(gql, register, monkeypatch):
    token = register()["token"]
    _break_user_lookup(monkeypatch)

    body = gql(ME, token=token)

    assert body["data"]["me"] is None
    assert body["errors"][0]["message"] == "Unexpected error."
    assert "db down" not in str(body)


def test_unexpected_errors_are_shown_in_debug_mode(monkeypatch):
    from fastapi.testclient import TestClient
    from server.main import create_app

    monkeypatch.setenv("DEBUG", "true")
    get_settings.cache_clear()

    with TestClient(create_app()) as debug_client:
        registered = debug_client.post(
            "/graphql",
            json={"query": ADD_USER, "variables": {"username": "alice", "email": "alice@x.com", "password": "pw123"}},
        ).json()["data"]["addUser"]
        _break_user_lookup(monkeypatch)

        body = debug_client.post(
            "/graphql",
            json={"query": ME},
            headers={"Authorization": f"Bearer {registered['token']}"},
        ).json()

    assert body["errors"][0]["message"] == "db down"


def test_domain_errors_are_not_masked(gql):
    body = gql(ME)

    assert body["errors"][0]["message"] == "You need to be logged in!"
