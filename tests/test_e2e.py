import json
from dataclasses import replace
import sys
import os

import pytest

# Add src to path
sys.path.append(os.path.join(os.path.dirname(__file__), "..", "src"))

import main
from blocklayer.block import Block


@pytest.fixture
def temp_config(tmp_path):
    config_path = tmp_path / "test_config.yaml"
    with open(config_path, "w") as f:
        f.write("block:\n  chain: 5\n  time: 1234\n  solar_price: 3\n")
        f.write("  accounts_hash: \"" + "ab" * 32 + "\"\n")
    return str(config_path)


def read_events(capsys):
    out = capsys.readouterr().out
    return [json.loads(line) for line in out.splitlines() if line.strip()]


def test_genesis_from_config(temp_config, capsys):
    assert main.main(["--mode", "genesis", "--config", temp_config]) == 0
    [event] = read_events(capsys)
    assert event["event"] == "encoded"
    assert event["number"] == 0

    block = Block.from_bytes(bytes.fromhex(event["bytes"]))
    assert block.chain == 5
    assert block.time == 1234
    assert block.solar_price == 3
    assert block.accounts_hash == bytes.fromhex("ab" * 32)
    assert block.hash().hex() == event["hash"]


def test_missing_config_uses_defaults(tmp_path):
    block = main.build_genesis(str(tmp_path / "missing.yaml"))
    assert block.chain == main.DEFAULT_BLOCK_CONFIG["chain"]
    assert block.number == 0


def test_sample_is_deterministic(temp_config, capsys):
    args = ["--mode", "sample", "--config", temp_config, "--seed", "42", "--number", "3"]
    main.main(args)
    first = capsys.readouterr().out
    main.main(args)
    second = capsys.readouterr().out
    assert first == second


def test_sample_block_verifies(temp_config):
    block = main.build_sample(temp_config, seed=7, number=4, num_txs=3)
    assert block.verify() is True
    assert len(block.transactions) == 3
    assert all(tx.verify() for tx in block.transactions)


def test_inspect_roundtrip(temp_config, tmp_path, capsys):
    block = main.build_sample(temp_config, seed=1, number=2, num_txs=1)
    hex_path = tmp_path / "block.hex"
    hex_path.write_text(block.to_bytes().hex())

    assert main.main(["--mode", "inspect", "--input", str(hex_path)]) == 0
    [event] = read_events(capsys)
    assert event["event"] == "decoded"
    assert event["number"] == 2
    assert event["hash"] == block.hash().hex()
    assert event["tx_count"] == 1


def test_inspect_rejects_tampered_block(temp_config, tmp_path, capsys):
    block = main.build_sample(temp_config, seed=1, number=2, num_txs=1)
    block = replace(block, solar_used=block.solar_used + 1)
    hex_path = tmp_path / "block.hex"
    hex_path.write_text(block.to_bytes().hex())

    assert main.main(["--mode", "inspect", "--input", str(hex_path)]) == 1
    [event] = read_events(capsys)
    assert event["event"] == "decode_failed"
    assert event["kind"] == "verification"


def test_inspect_rejects_bad_hex(capsys):
    logger = main.JsonLinesLogger(sys.stdout)
    assert main.inspect_block("zz", logger) == 1
    [event] = read_events(capsys)
    assert event["kind"] == "hex"


def test_logger_sequence_numbers(capsys):
    logger = main.JsonLinesLogger(sys.stdout)
    logger.log_event(event="a")
    logger.log_event(event="b", number=1, block_hash=b"\x01" * 32)
    events = read_events(capsys)
    assert [e["seq"] for e in events] == [0, 1]
    assert events[1]["hash"] == "01" * 32


@pytest.mark.parametrize("body", [
    "block:\n  accounts_hash: 1234\n",
    "block:\n  accounts_hash: \"abcd\"\n",
    "block:\n  chain: -1\n",
    "block:\n  time: soon\n",
])
def test_bad_config_is_reported(tmp_path, capsys, body):
    config_path = tmp_path / "bad.yaml"
    config_path.write_text(body)
    assert main.main(["--mode", "genesis", "--config", str(config_path)]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Invalid config" in captured.err


def test_sample_rejects_negative_number(temp_config):
    with pytest.raises(main.ConfigError):
        main.build_sample(temp_config, seed=0, number=-1, num_txs=0)
