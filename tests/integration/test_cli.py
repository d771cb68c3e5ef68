"""
CLI integration tests using Click's test runner.

The JSON-RPC endpoint is replaced by an in-memory FakeChain, so these run
without network access.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from conftest import GWEI, PLAIN_ACCOUNT, TOKEN_CONTRACT, FakeChain, erc20_results
from warden.chain.blockchain import Blockchain
from warden.cli import cli
from warden.config import Settings
from warden.keys import generate_account, save_private_key

RPC = ["--rpc-url", "http://node.test"]


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def warden_home(tmp_path: Path) -> Iterator[Path]:
    """Point ~/.warden/.env at a temporary file with no key in the env."""
    env_path = tmp_path / ".warden" / ".env"
    env = {k: v for k, v in os.environ.items() if k != "PRIVATE_KEY" and not k.startswith("WARDEN_")}
    with patch.dict(os.environ, env, clear=True):
        with patch("warden.keys.WARDEN_ENV", env_path), patch("warden.config.WARDEN_ENV", env_path):
            yield env_path


@pytest.fixture()
def wallet(warden_home: Path) -> tuple[str, str]:
    private_key, address = generate_account()
    save_private_key(private_key, warden_home)
    return private_key, address.checksum


@pytest.fixture()
def chain() -> FakeChain:
    return FakeChain(
        base_fee=10 * GWEI,
        gas_price=12 * GWEI,
        network_id=11155111,
        balance=3 * 10**18,
        call_results=erc20_results(balance=5_000_000, decimals=6, symbol="USDC"),
    )


@pytest.fixture()
def connected(chain: FakeChain) -> Iterator[FakeChain]:
    blockchain = Blockchain(chain, Settings(), provider_url="http://node.test")
    with patch.object(Blockchain, "connect", return_value=blockchain):
        yield chain


class TestAccount:
    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "1.0.0" in result.output

    def test_generate_without_saving(self, runner: CliRunner, warden_home: Path) -> None:
        result = runner.invoke(cli, ["generate"])
        assert result.exit_code == 0
        assert "Address: 0x" in result.output
        assert "not stored" in result.output
        assert not warden_home.exists()

    def test_generate_save(self, runner: CliRunner, warden_home: Path) -> None:
        result = runner.invoke(cli, ["generate", "--save"])
        assert result.exit_code == 0
        assert "PRIVATE_KEY=0x" in warden_home.read_text(encoding="utf-8")

    def test_generate_refuses_to_overwrite(self, runner: CliRunner, wallet: tuple[str, str], warden_home: Path) -> None:
        result = runner.invoke(cli, ["generate", "--save"])
        assert result.exit_code == 2
        assert "--force" in result.output
        assert wallet[0] in warden_home.read_text(encoding="utf-8")

    def test_whoami(self, runner: CliRunner, wallet: tuple[str, str]) -> None:
        result = runner.invoke(cli, ["whoami"])
        assert result.exit_code == 0
        assert wallet[1] in result.output

    def test_whoami_without_wallet(self, runner: CliRunner, warden_home: Path) -> None:
        result = runner.invoke(cli, ["whoami"])
        assert result.exit_code == 2
        assert "No wallet found" in result.output

    def test_whoami_with_malformed_key(self, runner: CliRunner, warden_home: Path) -> None:
        with patch.dict(os.environ, {"PRIVATE_KEY": "0xnothex"}):
            result = runner.invoke(cli, ["whoami"])
        assert result.exit_code == 2
        assert "Invalid PRIVATE_KEY" in result.output
        assert "0xnothex" not in result.output


class TestBalance:
    def test_balance_of_address(self, runner: CliRunner, warden_home: Path, connected: FakeChain) -> None:
        result = runner.invoke(cli, [*RPC, "balance", PLAIN_ACCOUNT])
        assert result.exit_code == 0
        assert "3 ETH" in result.output

    def test_missing_endpoint(self, runner: CliRunner, warden_home: Path) -> None:
        result = runner.invoke(cli, ["balance", PLAIN_ACCOUNT])
        assert result.exit_code == 2
        assert "WARDEN_RPC_URL" in result.output

    def test_bad_address(self, runner: CliRunner, warden_home: Path, connected: FakeChain) -> None:
        result = runner.invoke(cli, [*RPC, "balance", "0x1234"])
        assert result.exit_code != 0
        assert connected.calls["get_balance"] == 0


class TestSend:
    def test_dry_run(self, runner: CliRunner, wallet: tuple[str, str], connected: FakeChain) -> None:
        result = runner.invoke(cli, [*RPC, "send", "--to", PLAIN_ACCOUNT, "--amount", "0.5", "--dry-run"])

        assert result.exit_code == 0
        assert "maxFeePerGas" in result.output
        assert "gasPrice" not in result.output
        assert "Dry run" in result.output
        assert connected.sent == []

    def test_send_confirmed(self, runner: CliRunner, wallet: tuple[str, str], connected: FakeChain) -> None:
        result = runner.invoke(cli, [*RPC, "send", "--to", PLAIN_ACCOUNT, "--amount", "0.5", "--yes"])

        assert result.exit_code == 0
        assert "Transaction sent!" in result.output
        assert "0x" + "ab" * 32 in result.output
        assert len(connected.sent) == 1

    def test_send_declined(self, runner: CliRunner, wallet: tuple[str, str], connected: FakeChain) -> None:
        result = runner.invoke(cli, [*RPC, "send", "--to", PLAIN_ACCOUNT, "--amount", "0.5"], input="n\n")

        assert result.exit_code == 1
        assert connected.sent == []

    def test_gas_ceiling_too_low_aborts(self, runner: CliRunner, wallet: tuple[str, str], connected: FakeChain) -> None:
        connected.gas_estimate = 200_000

        result = runner.invoke(cli, [*RPC, "send", "--to", TOKEN_CONTRACT, "--data", "0x01", "--yes"])

        assert result.exit_code == 2
        assert "Too low gas_limit" in result.output
        assert connected.sent == []

    def test_transport_failure_aborts(self, runner: CliRunner, wallet: tuple[str, str], connected: FakeChain) -> None:
        connected.failing.add("get_gas_price")

        result = runner.invoke(cli, [*RPC, "send", "--to", PLAIN_ACCOUNT, "--amount", "1", "--yes"])

        assert result.exit_code == 3
        assert connected.sent == []

    def test_negative_amount(self, runner: CliRunner, wallet: tuple[str, str], connected: FakeChain) -> None:
        result = runner.invoke(cli, [*RPC, "send", "--to", PLAIN_ACCOUNT, "--amount=-1", "--yes"])

        assert result.exit_code == 4
        assert connected.sent == []


class TestToken:
    def test_balance(self, runner: CliRunner, wallet: tuple[str, str], connected: FakeChain) -> None:
        result = runner.invoke(cli, [*RPC, "token", "balance", "--token", TOKEN_CONTRACT])

        assert result.exit_code == 0
        assert "5 USDC" in result.output
        assert "6 decimals" in result.output

    def test_transfer(self, runner: CliRunner, wallet: tuple[str, str], connected: FakeChain) -> None:
        result = runner.invoke(
            cli,
            [*RPC, "token", "transfer", "--token", TOKEN_CONTRACT, "--to", PLAIN_ACCOUNT, "--amount", "1.5", "--yes"],
        )

        assert result.exit_code == 0
        assert "Transfer sent!" in result.output
        assert len(connected.sent) == 1
        assert connected.estimate_requests[0]["data"].startswith("0xa9059cbb")

    def test_transfer_insufficient_balance(self, runner: CliRunner, wallet: tuple[str, str], connected: FakeChain) -> None:
        result = runner.invoke(
            cli,
            [*RPC, "token", "transfer", "--token", TOKEN_CONTRACT, "--to", PLAIN_ACCOUNT, "--amount", "6", "--yes"],
        )

        assert result.exit_code == 4
        assert "Insufficient balance" in result.output
        assert connected.sent == []


class TestInfo:
    def test_info(self, runner: CliRunner, wallet: tuple[str, str], connected: FakeChain) -> None:
        result = runner.invoke(cli, [*RPC, "info"])

        assert result.exit_code == 0
        assert "11155111" in result.output
        assert "EIP-1559" in result.output
        assert wallet[1] in result.output
