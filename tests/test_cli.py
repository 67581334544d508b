from __future__ import annotations

import json

import pytest
import responses

from open_kkt_sdk.cli import build_parser, main

BASE = "https://kkt.example.com/api/v2/"


@pytest.fixture(autouse=True)
def _env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPEN_KKT_ACCOUNT_URL", BASE)
    monkeypatch.setenv("OPEN_KKT_APP_ID", "app-42")
    monkeypatch.setenv("OPEN_KKT_SECRET", "s3cr3t")
    monkeypatch.delenv("OPEN_KKT_LOGS_DIR", raising=False)
    monkeypatch.delenv("OPEN_KKT_TOKEN_CACHE", raising=False)


def test_parser_defaults_author() -> None:
    args = build_parser().parse_args(["open-shift"])
    assert args.author == "name"


@responses.activate
def test_command_status_prints_json(capsys: pytest.CaptureFixture[str]) -> None:
    responses.add(responses.GET, BASE + "Token", json={"token": "token-1"}, status=200)
    responses.add(responses.GET, BASE + "Command/c-1", json={"status": "success"}, status=200)

    main(["command-status", "c-1"])

    assert json.loads(capsys.readouterr().out) == {"status": "success"}


@responses.activate
def test_print_check_reads_command_file(tmp_path, capsys: pytest.CaptureFixture[str]) -> None:
    responses.add(responses.GET, BASE + "Token", json={"token": "token-1"}, status=200)
    responses.add(responses.POST, BASE + "Command", json={"command_id": "c-2"}, status=200)
    command_file = tmp_path / "check.json"
    command_file.write_text(json.dumps({"goods": [{"name": "Хлеб", "price": 40}]}), encoding="utf-8")

    main(["print-check", str(command_file)])

    assert json.loads(capsys.readouterr().out) == {"command_id": "c-2"}
    sent = json.loads(responses.calls[-1].request.body)
    assert sent["type"] == "printCheck"
    assert sent["command"] == {"goods": [{"name": "Хлеб", "price": 40}]}


@responses.activate
def test_api_error_exits_with_code_one(capsys: pytest.CaptureFixture[str]) -> None:
    responses.add(responses.GET, BASE + "Token", json={"Result": "1001"}, status=401)

    with pytest.raises(SystemExit) as excinfo:
        main(["state"])

    assert excinfo.value.code == 1
    assert json.loads(capsys.readouterr().out)["error"] == "AUTH_REJECTED"


def test_missing_config_exits_with_code_two(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("OPEN_KKT_SECRET")
    with pytest.raises(SystemExit) as excinfo:
        main(["state"])
    assert excinfo.value.code == 2
