from __future__ import annotations

import dataclasses

import pytest

from smsverify.adapters.verify_rest import parse_response
from smsverify.domain.verification_models import (
    VerificationRequest,
    VerifyFailure,
    VerifySuccess,
)


class _ResponseStub:
    def __init__(self, payload, status_code=200, content_type="application/json"):
        self._payload = payload
        self.status_code = status_code
        self.text = str(payload)
        self.headers = {"Content-Type": content_type} if content_type else {}

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


def test_verification_request_is_immutable() -> None:
    request = VerificationRequest(destination="+14155550100", code="123456")

    with pytest.raises(dataclasses.FrozenInstanceError):
        request.code = "000000"  # type: ignore[misc]
    assert request.channel == "sms"
    assert request.language_ranges == ()


def test_parse_success_body() -> None:
    outcome = parse_response(_ResponseStub({"sid": "X", "status": "pending"}, 201))

    assert outcome == VerifySuccess(sid="X", status="pending", http_status=201)
    assert not outcome.is_approved


def test_parse_failure_body_coerces_numbers() -> None:
    outcome = parse_response(
        _ResponseStub({"status": "404", "code": 60200, "message": "Invalid parameter"}, 404)
    )

    assert outcome == VerifyFailure(status=404, code=60200, message="Invalid parameter", http_status=404)


def test_parse_non_json_failure_has_empty_fields() -> None:
    outcome = parse_response(_ResponseStub("Service Unavailable", 503, content_type="text/plain"))

    assert outcome == VerifyFailure(http_status=503)


def test_parse_unexpected_json_shape_degrades() -> None:
    outcome = parse_response(_ResponseStub(["not", "an", "object"], 200))

    assert outcome == VerifySuccess(http_status=200)


def test_parse_failure_with_broken_json_degrades() -> None:
    outcome = parse_response(_ResponseStub(ValueError("bad json"), 400))

    assert outcome == VerifyFailure(http_status=400)
