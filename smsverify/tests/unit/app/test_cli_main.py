from __future__ import annotations

import logging
from concurrent.futures import Future

import pytest

from smsverify.app import main as cli
from smsverify.adapters.verify_mock import VerifyMock


def test_send_with_mock_prints_sid(capsys: pytest.CaptureFixture) -> None:
    code = cli.main(["--mock", "send", "+14155550100", "--code", "123456", "--accept-language", "de-DE,en;q=0.5"])

    assert code == cli.EXIT_OK
    assert capsys.readouterr().out.strip().startswith("VE")


def test_approve_unknown_sid_with_mock_fails(capsys: pytest.CaptureFixture) -> None:
    code = cli.main(["--mock", "approve", "VEunknown"])

    assert code == cli.EXIT_FAILED
    assert capsys.readouterr().out.strip() == "not-approved"


def test_malformed_accept_language_is_a_usage_error() -> None:
    assert cli.main(["--mock", "send", "+14155550100", "--accept-language", "en;q=7"]) == cli.EXIT_USAGE


def test_missing_configuration_is_a_usage_error(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ("SMSVERIFY_ACCOUNT_ID", "SMSVERIFY_ACCOUNT_TOKEN", "SMSVERIFY_SERVICE_SID"):
        monkeypatch.delenv(var, raising=False)

    assert cli.main(["send", "+14155550100"]) == cli.EXIT_USAGE


def test_run_send_reports_provider_rejection() -> None:
    port = VerifyMock(failing_destinations={"+10000000000"})
    args = cli._parse_args(["send", "+10000000000", "--channel", "voice"])

    assert cli._run(args, port) == cli.EXIT_FAILED
    assert port.calls[0]["channel"] == "voice"
    assert len(port.calls[0]["code"]) == 6


class _StalledPort(VerifyMock):
    def deliver_sms_verification(self, destination, client_type, code, language_ranges):  # type: ignore[override]
        return Future()

    def confirm_approved(self, verification_id, user_agent, context):  # type: ignore[override]
        return Future()


@pytest.mark.parametrize(
    "command",
    [["send", "+14155550100"], ["approve", "VE123"]],
)
def test_result_wait_timeout_is_a_failure(
    command: list, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.setattr(cli, "VerifyMock", _StalledPort)

    with caplog.at_level(logging.ERROR, logger="smsverify.app.main"):
        code = cli.main(["--mock", "--timeout", "0.01", *command])

    assert code == cli.EXIT_FAILED
    assert "REQUEST_TIMEOUT" in caplog.text
