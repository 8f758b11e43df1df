from __future__ import annotations

import json

import pytest

import kuna_client.cli as cli_mod
from kuna_client.client import KunaClient
from kuna_client.nonce import fixed_nonce

from tests._fakes import FakeTransport


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli_mod, "setup_logging", lambda level: None)
    for name in ("KUNA_ACCESS_KEY", "KUNA_SECRET_KEY", "KUNA_BASE_URL"):
        monkeypatch.delenv(name, raising=False)


def test_ticker_command_prints_flat_json(capsys: pytest.CaptureFixture[str]):
    client = KunaClient(transport=FakeTransport((200, {"ticker": {"buy": "1", "amount": "3"}})))
    rc = cli_mod.main(["ticker", "btcuah"], client=client)
    assert rc == 0
    out = json.loads(capsys.readouterr().out)
    assert out["market"] == "btcuah"
    assert out["buy"] == "1"
    assert out["amount"] == "3"


def test_buy_command_places_order(capsys: pytest.CaptureFixture[str]):
    transport = FakeTransport((201, {"id": 7, "side": "buy", "price": "100"}))
    client = KunaClient("AK", "SK", transport=transport, nonce=fixed_nonce(1))
    rc = cli_mod.main(["buy", "btcuah", "0.5", "100"], client=client)
    assert rc == 0
    assert json.loads(capsys.readouterr().out)["id"] == 7
    verb, url = transport.calls[0]
    assert verb == "POST"
    assert "market=btcuah&price=100&side=buy&tonce=1&volume=0.5&signature=" in url


def test_signed_command_without_keys_exits_1(capsys: pytest.CaptureFixture[str]):
    transport = FakeTransport()
    rc = cli_mod.main(["me"], client=KunaClient(transport=transport))
    assert rc == 1
    assert "error:" in capsys.readouterr().err
    assert transport.calls == []


def test_missing_config_file_exits_1(tmp_path, capsys: pytest.CaptureFixture[str]):
    rc = cli_mod.main(["--config", str(tmp_path / "missing.yaml"), "timestamp"])
    assert rc == 1
    assert "error:" in capsys.readouterr().err
