"""Tests for the REST gateway, with a fake HTTP session in place of requests."""

import json
import pytest
from datetime import date
from decimal import Decimal

import requests

from conftest import run
from fintrack.models.ledger import EntryType
from fintrack.services.gateway import (
    AuthError,
    NotFoundError,
    PayloadValidationError,
    RestLedgerGateway,
    TransportError,
    ValidationError,
)


class FakeResponse:
    def __init__(self, status_code=200, body=None, raw=None):
        self.status_code = status_code
        if raw is not None:
            self.content = raw
        elif body is not None:
            self.content = json.dumps(body).encode()
        else:
            self.content = b""

    def json(self):
        return json.loads(self.content)


class FakeSession:
    """Records requests and answers from a queue."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def request(self, method, url, params=None, json=None, timeout=None):
        self.requests.append({
            "method": method,
            "url": url,
            "params": params,
            "json": json,
            "timeout": timeout,
        })
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def make_gateway(*responses):
    session = FakeSession(*responses)
    gateway = RestLedgerGateway(
        base_url="http://ledger.test/",
        timeout_seconds=3.0,
        session=session,
    )
    return gateway, session


TRANSACTION = {
    "id": 5,
    "user_id": 1,
    "amount": 42.5,
    "type": "despesa",
    "category_id": 3,
    "date": "2024-05-01",
    "description": "Lunch",
}


class TestRequests:
    """Tests for what goes over the wire."""

    def test_login_posts_credentials(self):
        gateway, session = make_gateway(
            FakeResponse(200, {"id": 1, "name": "Ana", "email": "ana@example.com"})
        )
        user = run(gateway.login("ana@example.com", "secret"))

        assert user.id == 1
        sent = session.requests[0]
        assert sent["method"] == "POST"
        assert sent["url"] == "http://ledger.test/auth/login"
        assert sent["json"] == {"email": "ana@example.com", "password": "secret"}
        assert sent["timeout"] == 3.0

    def test_list_is_scoped_by_owner(self):
        gateway, session = make_gateway(FakeResponse(200, [TRANSACTION]))
        [tx] = run(gateway.list_transactions(1))
        assert tx.amount == Decimal("42.5")
        assert session.requests[0]["params"] == {"user_id": 1}
        assert session.requests[0]["url"] == "http://ledger.test/transactions/"

    def test_create_transaction_body(self):
        gateway, session = make_gateway(FakeResponse(201, TRANSACTION))
        created = run(gateway.create_transaction(
            1, Decimal("42.50"), EntryType.EXPENSE, 3, date(2024, 5, 1), "Lunch"
        ))
        assert created.id == 5
        assert session.requests[0]["json"] == {
            "user_id": 1,
            "amount": 42.5,
            "type": "despesa",
            "category_id": 3,
            "date": "2024-05-01",
            "description": "Lunch",
        }

    def test_deposit_and_undo_paths(self):
        gateway, session = make_gateway(
            FakeResponse(200, {"message": "ok"}),
            FakeResponse(204),
        )
        ack = run(gateway.deposit_to_goal(7, Decimal("10")))
        assert ack.message == "ok"
        assert session.requests[0]["url"] == "http://ledger.test/metas/7/deposit"
        assert session.requests[0]["json"] == {"amount": 10.0}

        ack = run(gateway.undo_transaction(5))
        assert ack.message is None
        assert session.requests[1]["url"] == "http://ledger.test/transactions/5/undo"

    def test_goal_progress(self):
        gateway, _ = make_gateway(FakeResponse(200, {"meta_id": 7, "progress": 25.0}))
        snapshot = run(gateway.fetch_goal_progress(7))
        assert snapshot.progress == 25.0

    def test_invalid_draft_not_sent(self):
        """Test that a bad request body fails before any HTTP call."""
        gateway, session = make_gateway()
        with pytest.raises(ValidationError):
            run(gateway.deposit_to_goal(7, Decimal("0")))
        assert session.requests == []


class TestErrorMapping:
    """Tests for status codes and bodies mapped to LedgerError subclasses."""

    def test_401_is_auth_error(self):
        gateway, _ = make_gateway(FakeResponse(401, {"error": "Invalid email or password"}))
        with pytest.raises(AuthError) as exc_info:
            run(gateway.login("ana@example.com", "wrong"))
        assert exc_info.value.server_message == "Invalid email or password"

    def test_404_is_not_found(self):
        gateway, _ = make_gateway(FakeResponse(404, {"message": "User not found"}))
        with pytest.raises(NotFoundError):
            run(gateway.fetch_user(99))

    def test_500_is_transport_error(self):
        gateway, _ = make_gateway(FakeResponse(500, raw=b"<html>oops</html>"))
        with pytest.raises(TransportError) as exc_info:
            run(gateway.list_goals(1))
        assert exc_info.value.status_code == 500
        assert exc_info.value.server_message is None

    def test_connection_error_is_transport_error(self):
        gateway, _ = make_gateway(requests.ConnectionError("refused"))
        with pytest.raises(TransportError):
            run(gateway.list_investments())

    def test_non_json_success_body(self):
        gateway, _ = make_gateway(FakeResponse(200, raw=b"not json"))
        with pytest.raises(TransportError):
            run(gateway.list_categories(1))

    def test_wrong_shape_is_payload_error(self):
        """Test a 2xx body with the wrong shape is both kinds of error."""
        gateway, _ = make_gateway(FakeResponse(200, [{"id": 1, "name": "x"}]))
        with pytest.raises(PayloadValidationError) as exc_info:
            run(gateway.list_categories(1))
        assert isinstance(exc_info.value, ValidationError)
        assert isinstance(exc_info.value, TransportError)

    def test_string_error_body(self):
        gateway, _ = make_gateway(FakeResponse(400, "Meta inválida"))
        with pytest.raises(TransportError) as exc_info:
            run(gateway.create_goal(1, "Trip", Decimal("10"), date(2030, 1, 1), "Leisure"))
        assert exc_info.value.server_message == "Meta inválida"
