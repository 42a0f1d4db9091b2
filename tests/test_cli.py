"""Tests for the command line interface."""

from __future__ import annotations

from concurrent.futures import Future
from pathlib import Path
import json
import logging
import sys

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import mailconnect.cli as cli_module
from mailconnect.errors import TransportFailure


class FakeOutlookClient:
    instances: list["FakeOutlookClient"] = []
    failing: set[str] = set()

    def __init__(self, endpoint_uri, resolver, *, timeout=None) -> None:
        self.endpoint_uri = endpoint_uri
        self.resolver = resolver
        self.timeout = timeout
        self.messages = []
        FakeOutlookClient.instances.append(self)

    def send_message(self, message, save_to_sent_items):
        self.messages.append(message)
        future: Future = Future()
        address = message.to_recipients[0].email_address.address
        if address in FakeOutlookClient.failing:
            future.set_exception(TransportFailure("Mail service answered 503", status_code=503))
        else:
            future.set_result(202)
        return future


@pytest.fixture(autouse=True)
def fake_transport(monkeypatch):
    FakeOutlookClient.instances = []
    FakeOutlookClient.failing = set()
    monkeypatch.setattr(cli_module, "OutlookClient", FakeOutlookClient)
    monkeypatch.delenv("MAIL_SERVICE_RESOURCE_ID", raising=False)
    monkeypatch.delenv("MAIL_SERVICE_ENDPOINT_URI", raising=False)
    monkeypatch.delenv("MAIL_HTTP_TIMEOUT", raising=False)
    monkeypatch.setenv("MAIL_ACCESS_TOKEN", "secret-token")
    monkeypatch.setattr(
        cli_module.getpass,
        "getpass",
        lambda prompt="": (_ for _ in ()).throw(AssertionError("prompted for token")),
    )
    return FakeOutlookClient


def test_cli_sends_rendered_message(caplog):
    caplog.set_level(logging.DEBUG)

    cli_module.main(
        [
            "--to",
            "a@b.com",
            "--resource-id",
            "res-1",
            "--endpoint-uri",
            "https://mail.example/api",
            "--name",
            "Ana",
            "--timeout",
            "3",
        ]
    )

    [client] = FakeOutlookClient.instances
    assert client.endpoint_uri == "https://mail.example/api"
    assert client.timeout == 3
    assert client.resolver.authorize({})["Authorization"] == "Bearer secret-token"
    [message] = client.messages
    assert "Congratulations Ana!" in message.body.content

    messages = [record.getMessage() for record in caplog.records]
    assert any("success=1 failure=0" in message for message in messages)
    assert all("secret-token" not in message for message in messages)


def test_cli_reads_configuration_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("MAIL_SERVICE_RESOURCE_ID", "res-1")
    monkeypatch.setenv("MAIL_SERVICE_ENDPOINT_URI", "https://mail.example/api")
    body_file = tmp_path / "body.html"
    body_file.write_text("<p>Hello {{ name }}</p>", encoding="utf-8")

    cli_module.main(
        [
            "--to",
            "a@b.com",
            "--to",
            "c@d.com",
            "--name",
            "Ana",
            "--subject-template",
            "Hi {{ name }}",
            "--body-template-file",
            str(body_file),
        ]
    )

    sent = [client.messages[0] for client in FakeOutlookClient.instances]
    assert [m.to_recipients[0].email_address.address for m in sent] == ["a@b.com", "c@d.com"]
    assert {m.subject for m in sent} == {"Hi Ana"}
    assert {m.body.content for m in sent} == {"<p>Hello Ana</p>"}


def test_cli_exits_when_configuration_missing(caplog):
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["--to", "a@b.com", "--resource-id", "res-1"])

    assert excinfo.value.code == 1
    assert FakeOutlookClient.instances == []
    assert any("ServiceEndpointUri" in record.getMessage() for record in caplog.records)


def test_cli_exits_when_a_send_fails():
    FakeOutlookClient.failing = {"c@d.com"}

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(
            [
                "--to",
                "a@b.com",
                "--to",
                "c@d.com",
                "--resource-id",
                "res-1",
                "--endpoint-uri",
                "https://mail.example/api",
            ]
        )

    assert excinfo.value.code == 1
    assert len(FakeOutlookClient.instances) == 2


def test_cli_exits_on_template_error():
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["--to", "a@b.com", "--body-template", "{{ missing }}", "--dry-run"])

    assert excinfo.value.code == 1


def test_cli_dry_run_logs_payload_without_sending(caplog):
    caplog.set_level(logging.INFO)

    cli_module.main(
        ["--to", "a@b.com", "--subject-template", "Hi", "--body-template", "<b>x</b>", "--dry-run"]
    )

    assert FakeOutlookClient.instances == []
    [record] = [r for r in caplog.records if "Dry run" in r.getMessage()]
    payload = json.loads(record.getMessage().split("\n", 1)[1])
    assert payload["SaveToSentItems"] is True
    assert payload["Message"]["Subject"] == "Hi"
    assert payload["Message"]["Body"] == {"ContentType": "HTML", "Content": "<b>x</b>"}


def test_cli_checks_configuration_before_prompting_for_token(monkeypatch):
    monkeypatch.delenv("MAIL_ACCESS_TOKEN")

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["--to", "a@b.com", "--resource-id", "res-1"])

    assert excinfo.value.code == 1
    assert FakeOutlookClient.instances == []


def test_cli_prompts_for_token_when_none_is_given(monkeypatch):
    monkeypatch.delenv("MAIL_ACCESS_TOKEN")
    prompts: list[str] = []

    def fake_getpass(prompt=""):
        prompts.append(prompt)
        return "typed-token"

    monkeypatch.setattr(cli_module.getpass, "getpass", fake_getpass)

    cli_module.main(
        ["--to", "a@b.com", "--resource-id", "res-1", "--endpoint-uri", "https://mail.example/api"]
    )

    assert prompts == ["Access token: "]
    [client] = FakeOutlookClient.instances
    assert client.resolver.authorize({})["Authorization"] == "Bearer typed-token"


def test_cli_warns_about_token_on_command_line(caplog):
    caplog.set_level(logging.WARNING)

    cli_module.main(
        [
            "--to",
            "a@b.com",
            "--resource-id",
            "res-1",
            "--endpoint-uri",
            "https://mail.example/api",
            "--access-token",
            "flag-token",
        ]
    )

    warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
    assert any("--access-token" in message for message in warnings)
    assert all("flag-token" not in message for message in warnings)
    [client] = FakeOutlookClient.instances
    assert client.resolver.authorize({})["Authorization"] == "Bearer flag-token"
