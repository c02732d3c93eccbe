"""
CLI integration tests using Click's test runner.

Tests verify that the CLI commands work end-to-end via the Click
CliRunner, without requiring network access or chain interaction.
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import structlog
from click.testing import CliRunner
from multiformats import CID, multihash

from odl.cli import cli, configure_logging
from odl.errors import ODLError
from odl.identity.eth import generate_eoa, save_private_key

CSV = "age,income,score\n25,1.5,0.75\n40,2.25,-1.1\n"


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    structlog.reset_defaults()


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def odl_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point ~/.odl at a temporary directory with no key in the environment."""
    home = tmp_path / ".odl"
    home.mkdir()
    monkeypatch.setenv("PRIVATE_KEY", "")
    monkeypatch.delenv("PRIVATE_KEY")
    monkeypatch.setattr("odl.identity.eth.ODL_ENV", home / ".env")
    return home


@pytest.fixture()
def wallet(odl_home: Path) -> tuple[str, str]:
    """Generate and save a wallet to the temp odl home."""
    private_key, address = generate_eoa()
    save_private_key(private_key, odl_home / ".env")
    return private_key, address


@pytest.fixture()
def csv_file(tmp_path: Path) -> Path:
    path = tmp_path / "loans.csv"
    path.write_text(CSV, encoding="utf-8")
    return path


class TestVersion:
    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.3.0" in result.output


class TestIdentity:
    def test_whoami_with_wallet(self, runner: CliRunner, wallet: tuple[str, str]) -> None:
        result = runner.invoke(cli, ["whoami"])
        assert result.exit_code == 0
        assert wallet[1] in result.output

    def test_whoami_without_wallet(self, runner: CliRunner, odl_home: Path) -> None:
        result = runner.invoke(cli, ["whoami"])
        assert result.exit_code == 1
        assert "odl genesis" in result.output

    def test_genesis_creates_key(self, runner: CliRunner, odl_home: Path) -> None:
        result = runner.invoke(cli, ["genesis"])
        assert result.exit_code == 0
        assert "Key created." in result.output
        assert "PRIVATE_KEY=0x" in (odl_home / ".env").read_text(encoding="utf-8")

    def test_genesis_keeps_existing_key(self, runner: CliRunner, wallet: tuple[str, str]) -> None:
        result = runner.invoke(cli, ["genesis"])
        assert result.exit_code == 0
        assert f"Key already exists: {wallet[1]}" in result.output


class TestData:
    def test_normalize(self, runner: CliRunner, csv_file: Path) -> None:
        result = runner.invoke(
            cli, ["normalize", str(csv_file), "-i", "income", "-i", "age", "-l", "score"]
        )
        assert result.exit_code == 0
        assert json.loads(result.output) == {
            "data": [[15000, 250000], [22500, 400000]],
            "labels": [7500, -11000],
        }

    def test_normalize_missing_column(self, runner: CliRunner, csv_file: Path) -> None:
        result = runner.invoke(cli, ["normalize", str(csv_file), "-i", "height", "-l", "score"])
        assert result.exit_code == 1
        assert "height" in result.output

    def test_cid_hex(self, runner: CliRunner) -> None:
        digest = multihash.digest(b"hello", "sha2-256")
        cid = str(CID("base58btc", 0, "dag-pb", digest))
        result = runner.invoke(cli, ["cid-hex", cid])
        assert result.exit_code == 0
        assert result.output.strip() == "1220" + digest[2:].hex()

    def test_cid_hex_invalid(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["cid-hex", "not-a-cid"])
        assert result.exit_code == 1

    def test_upload_local_dir(
        self, runner: CliRunner, odl_home: Path, csv_file: Path, tmp_path: Path
    ) -> None:
        pins = tmp_path / "pins"
        result = runner.invoke(cli, ["upload", str(csv_file), "--local-dir", str(pins)])
        assert result.exit_code == 0
        (pinned,) = pins.iterdir()
        cid = pinned.name.removesuffix(".json")
        assert result.output == f"{cid}\n"
        stored = json.loads((pins / f"{cid}.json").read_text(encoding="utf-8"))
        assert stored == [[250000, 15000, 7500], [400000, 22500, -11000]]


class TestContractReads:
    def test_schemas(self, runner: CliRunner) -> None:
        client = MagicMock()
        client.get_all_schemas.return_value = ["loans", "games"]
        with patch("odl.cli._client", return_value=client):
            result = runner.invoke(cli, ["schemas"])
        assert result.exit_code == 0
        assert result.output.splitlines() == ["loans", "games"]

    def test_schemas_empty(self, runner: CliRunner) -> None:
        client = MagicMock()
        client.get_all_schemas.return_value = []
        with patch("odl.cli._client", return_value=client):
            result = runner.invoke(cli, ["schemas"])
        assert "No schemas registered." in result.output

    def test_credits(self, runner: CliRunner) -> None:
        client = MagicMock()
        client.consumer_credits.return_value = 12
        with patch("odl.cli._client", return_value=client):
            result = runner.invoke(cli, ["credits", "0x" + "1" * 40])
        assert result.exit_code == 0
        assert "Credits: 12" in result.output
        client.consumer_credits.assert_called_once_with("0x" + "1" * 40)

    def test_read_failure(self, runner: CliRunner) -> None:
        client = MagicMock()
        client.get_all_schemas.side_effect = ODLError("RPC error -32000: execution reverted")
        with patch("odl.cli._client", return_value=client):
            result = runner.invoke(cli, ["schemas"])
        assert result.exit_code == 1
        assert "execution reverted" in result.output


class TestLogging:
    def test_events_go_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True)
        structlog.get_logger().info("content_pinned", cid="bafy")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "content_pinned" in captured.err

    def test_info_hidden_by_default(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging()
        log = structlog.get_logger()
        log.info("content_pinned", cid="bafy")
        log.warning("gas_estimate_unsupported")
        captured = capsys.readouterr()
        assert "content_pinned" not in captured.err
        assert "gas_estimate_unsupported" in captured.err
