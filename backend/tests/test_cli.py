import json

import pytest
from base58 import b58encode
from solders.keypair import Keypair

import trade_cli
from amm_direct.errors import InvalidInput, LedgerError
from amm_direct.pda import derive_boop_bonding_curve
from conftest import FakeLedger, boop_curve_bytes
from trader import LaunchpadTrader


def _argv(mint, wallet, *extra):
    return [
        "--market", "BOOP_FUN",
        "--direction", "buy",
        "--mint", str(mint),
        "--amount", "0.1",
        "--slippage", "5",
        "--private-key", b58encode(bytes(wallet)).decode(),
        *extra,
    ]


class TestArguments:
    def test_bare_and_valued_flags(self, mint, wallet) -> None:
        args = trade_cli.build_parser().parse_args(_argv(mint, wallet, "--quote", "--dry-run", "false"))
        assert trade_cli.parse_bool(args.quote)
        assert not trade_cli.parse_bool(args.dry_run)
        assert not trade_cli.parse_bool(args.estimate_fees)
        assert args.priority_fee == 0.0

    @pytest.mark.parametrize("value", ["true", "1", "YES", " y "])
    def test_truthy(self, value) -> None:
        assert trade_cli.parse_bool(value)

    def test_missing_required_flag_exits(self) -> None:
        with pytest.raises(SystemExit):
            trade_cli.build_parser().parse_args(["--market", "HEAVEN"])


class TestKeypair:
    def test_round_trip(self) -> None:
        kp = Keypair()
        assert trade_cli.load_keypair(b58encode(bytes(kp)).decode()).pubkey() == kp.pubkey()

    def test_bad_characters(self) -> None:
        with pytest.raises(InvalidInput):
            trade_cli.load_keypair("0OIl")


class TestMain:
    @pytest.fixture
    def ledger(self, mint) -> FakeLedger:
        curve = boop_curve_bytes(20_000_000_000, 0, 40_000_000_000, 10_000_000_000, 1_000_000_000_000_000)
        return FakeLedger({derive_boop_bonding_curve(mint): curve})

    @pytest.fixture(autouse=True)
    def fake_trader(self, monkeypatch, ledger) -> None:
        monkeypatch.setattr(trade_cli, "LaunchpadTrader", lambda config: LaunchpadTrader(ledger=ledger, config=config))

    def test_dry_run_prints_plan_summary(self, capsys, mint, wallet, ledger) -> None:
        assert trade_cli.main(_argv(mint, wallet, "--quote", "--dry-run")) == 0
        lines = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
        assert lines[0]["mode"] == "price"
        assert lines[0]["bondingCurvePercent"] == 25.0
        assert lines[1] == {"mode": "dry-run", "direction": "buy", "built": True, "instructions": 2}
        assert ledger.sent == []

    def test_send_prints_signature(self, capsys, mint, wallet, ledger) -> None:
        assert trade_cli.main(_argv(mint, wallet)) == 0
        assert capsys.readouterr().out.strip() == ledger.signature

    def test_failed_fee_estimate_does_not_block_trade(self, capsys, mint, wallet, ledger) -> None:
        async def broken_fee(message):
            raise LedgerError("getFeeForMessage failed: boom")

        ledger.get_fee_for_message = broken_fee
        assert trade_cli.main(_argv(mint, wallet, "--estimate-fees", "--dry-run")) == 0
        lines = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
        assert [line["mode"] for line in lines] == ["dry-run"]

    def test_missing_pool_exits_with_error(self, capsys, mint, wallet) -> None:
        argv = _argv(mint, wallet, "--dry-run")
        argv[1] = "HEAVEN"
        assert trade_cli.main(argv) == 1
        assert capsys.readouterr().out == ""

    def test_unknown_market_exits_with_error(self, mint, wallet) -> None:
        argv = _argv(mint, wallet)
        argv[1] = "UNISWAP"
        assert trade_cli.main(argv) == 1
