"""
Tests for HTTP status mapping and the FastAPI error handlers.

Uses FastAPI's TestClient against a small app with failing routes.
"""

import logging

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from apperrors import (
    Error,
    ErrorCode,
    configure,
    http_status_for,
    new_conflict,
    new_internal,
    new_not_found,
    to_error,
)
from apperrors.interfaces.handlers import error_response, register_error_handlers


def _make_app() -> FastAPI:
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/users/{user_id}")
    def get_user(user_id: str):
        raise new_not_found(None, "user missing", "UserService.Get")

    @app.get("/orders")
    def save_order():
        raise new_internal(
            ValueError("dsn=postgres://admin:secret@db"),
            "database unreachable",
            "OrderRepository.save",
        )

    @app.get("/crash")
    def crash():
        raise RuntimeError("secret state")

    return app


@pytest.fixture
def client() -> TestClient:
    return TestClient(_make_app(), raise_server_exceptions=False)


class TestStatusMapping:
    """Tests for http_status_for and Error.http_status_code."""

    @pytest.mark.parametrize(
        "code, status",
        [
            (ErrorCode.CONFLICT, 409),
            (ErrorCode.INVALID, 400),
            (ErrorCode.NOT_FOUND, 404),
            (ErrorCode.EXPIRED, 402),
            (ErrorCode.MAXIMUM_ATTEMPTS, 429),
            (ErrorCode.INTERNAL, 500),
            (ErrorCode.UNKNOWN, 500),
        ],
    )
    def test_known_codes(self, code, status) -> None:
        assert http_status_for(code) == status
        assert http_status_for(code.value) == status
        assert Error(code=code).http_status_code() == status

    @pytest.mark.parametrize("code", ["", None, "teapot"])
    def test_unset_or_unknown_code_is_500(self, code) -> None:
        assert http_status_for(code) == 500

    def test_empty_code_error_is_500(self) -> None:
        assert Error().http_status_code() == 500


class TestErrorResponse:
    """Tests for error_response."""

    def test_uses_effective_code_of_chain(self) -> None:
        err = Error(message="cannot reserve", err=new_conflict(None, "taken", "Seat.reserve"))
        response = error_response(err)
        assert response.status_code == 409
        assert b'"code":"conflict"' in response.body
        assert b'"message":"cannot reserve"' in response.body


class TestErrorHandlers:
    """Tests for register_error_handlers."""

    def test_client_error(self, client: TestClient) -> None:
        response = client.get("/users/42")
        assert response.status_code == 404
        assert response.json() == {
            "code": "not_found",
            "message": "user missing",
            "operation": "UserService.Get",
        }

    def test_internal_error_hides_details(self, client: TestClient) -> None:
        response = client.get("/orders")
        assert response.status_code == 500
        assert response.json() == {
            "code": "internal",
            "message": "An error has occurred.",
            "operation": "",
        }
        assert "secret" not in response.text

    def test_internal_message_exposed_when_configured(self, client: TestClient) -> None:
        configure(expose_internal_messages=True)
        response = client.get("/orders")
        assert response.status_code == 500
        assert response.json()["message"] == "database unreachable"
        assert response.json()["operation"] == "OrderRepository.save"

    def test_unexpected_exception(self, client: TestClient) -> None:
        response = client.get("/crash")
        assert response.status_code == 500
        assert response.json()["code"] == "internal"
        assert "secret" not in response.text

    def test_logging(self, client: TestClient, caplog) -> None:
        caplog.set_level(logging.WARNING, logger="apperrors.interfaces.handlers")
        client.get("/users/42")
        client.get("/orders")
        messages = [record.getMessage() for record in caplog.records]
        assert any(m.startswith("Request rejected: <not_found>") for m in messages)
        assert any("Type: internal, Message: database unreachable" in m for m in messages)


class TestInternalDetailsHidden:
    """Internal text stays hidden however deep the internal error sits."""

    def test_hand_built_wrapper_around_internal_error(self) -> None:
        err = Error(err=new_internal(None, "db password rejected for admin", "Repo.save"))
        response = error_response(err)
        assert response.status_code == 500
        assert b"password" not in response.body
        assert b'"message":"An error has occurred."' in response.body

    def test_to_error_leaf_hides_foreign_text(self) -> None:
        response = error_response(to_error(ValueError("token=abc123")))
        assert response.status_code == 500
        assert b"abc123" not in response.body

    def test_internal_flag_deeper_in_chain(self) -> None:
        inner = new_internal(None, "disk quota of tenant 7", "Store.write")
        err = Error(code=ErrorCode.CONFLICT, message="save failed", err=Error(err=inner))
        response = error_response(err)
        assert response.status_code == 409
        assert b"tenant" not in response.body
        assert b"save failed" not in response.body

    def test_status_follows_chain_not_outer_code(self) -> None:
        err = Error(message="m", err=new_not_found(None, "x", "op"))
        assert err.http_status_code() == 500
        assert error_response(err).status_code == 404
