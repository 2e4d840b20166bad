import sys
import os
import argparse
import random
import subprocess
from dataclasses import replace

import yaml

# Add src to path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from core.crypto_layer import KeyPair
from core.logging_utils import JsonLinesLogger
from core.types_tx import SignedTx, TxBody
from blocklayer.block import Block
from blocklayer.errors import BlockDecodeError

DEFAULT_BLOCK_CONFIG = {"chain": 1, "time": 0, "solar_price": 1, "solar_used": 0}

_HASH_KEYS = ("accounts_hash", "previous_block_hash", "receipts_hash")
_INT_KEYS = ("chain", "time", "solar_price", "solar_used")


class ConfigError(ValueError):
    """A `block:` config value that cannot become a block field."""


def load_config(path):
    try:
        with open(path, "r") as f:
            config = yaml.safe_load(f) or {}
    except FileNotFoundError:
        print(f"Config file not found at {path}, using defaults.", file=sys.stderr)
        config = {}
    block_config = dict(DEFAULT_BLOCK_CONFIG)
    block_config.update(config.get("block") or {})
    return block_config


def block_from_config(block_config, number=0, previous_block_hash=None):
    """Build an unsigned block from the `block:` section of a config."""
    fields = {"number": number}
    for key in _INT_KEYS:
        if key in block_config:
            try:
                fields[key] = int(block_config[key])
            except (TypeError, ValueError) as e:
                raise ConfigError(f"{key}: {e}") from e
    for key in _HASH_KEYS:
        if block_config.get(key):
            # unquoted hex can load from YAML as an int
            try:
                fields[key] = bytes.fromhex(str(block_config[key]))
            except ValueError as e:
                raise ConfigError(f"{key}: {e}") from e
    if previous_block_hash is not None:
        fields["previous_block_hash"] = previous_block_hash
    try:
        return replace(Block.new(), **fields)
    except ValueError as e:
        raise ConfigError(str(e)) from e


def build_genesis(config_path):
    return block_from_config(load_config(config_path))


def build_sample(config_path, seed, number, num_txs):
    """Deterministic signed block: keys and transactions derive from seed."""
    rng = random.Random(seed)
    validator = KeyPair(seed=rng.randbytes(32))
    block = block_from_config(
        load_config(config_path),
        number=number,
        previous_block_hash=rng.randbytes(32),
    )
    txs = []
    for i in range(num_txs):
        sender = KeyPair(seed=rng.randbytes(32))
        body = TxBody(sender_pubkey_hex=sender.pubkey(), key=f"k{i}", value=i)
        txs.append(SignedTx.create(body, sender))
    return replace(block, transactions=txs).sign(validator)


def describe(block):
    return {
        "body_hash": block.body_hash().hex(),
        "transactions_hash": block.transactions_hash().hex(),
        "tx_count": len(block.transactions),
        "validator": block.validator.hex(),
    }


def inspect_block(raw_hex, logger):
    """Decode a hex-encoded block and log the outcome. Returns exit code."""
    try:
        data = bytes.fromhex(raw_hex.strip())
    except ValueError as e:
        logger.log_event(event="decode_failed", extra={"kind": "hex", "error": str(e)})
        return 1
    try:
        block = Block.from_bytes(data)
    except BlockDecodeError as e:
        logger.log_event(event="decode_failed", extra={"kind": e.kind.value, "error": str(e)})
        return 1
    logger.log_event(
        event="decoded",
        number=block.number,
        block_hash=block.hash(),
        extra=describe(block),
    )
    return 0


def emit_block(block, logger):
    logger.log_event(
        event="encoded",
        number=block.number,
        block_hash=block.hash(),
        extra=dict(describe(block), bytes=block.to_bytes().hex()),
    )


def run_tests():
    """Run all pytest tests."""
    result = subprocess.run(
        [sys.executable, "-m", "pytest", "tests/", "-v", "--tb=short"],
        cwd=os.path.dirname(os.path.dirname(os.path.abspath(__file__))),
        capture_output=False
    )
    return result.returncode


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Block core - build, encode, and inspect blocks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --mode genesis                           # Encode genesis block from default config
  python main.py --mode sample --seed 42 --number 3       # Encode a signed block
  python main.py --mode inspect --input block.hex         # Decode and verify a block
  python main.py --mode test                              # Run all tests
        """
    )

    parser.add_argument(
        "--mode",
        type=str,
        choices=["genesis", "sample", "inspect", "test"],
        default="genesis",
        help="Execution mode (default: genesis)"
    )
    parser.add_argument(
        "--config",
        type=str,
        default="config/default_config.yaml",
        help="Path to config file (for genesis/sample modes)"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Random seed for sample keys and transactions (default: 0)"
    )
    parser.add_argument(
        "--number",
        type=int,
        default=1,
        help="Block number for sample mode (default: 1)"
    )
    parser.add_argument(
        "--txs",
        type=int,
        default=2,
        help="Number of transactions in sample mode (default: 2)"
    )
    parser.add_argument(
        "--input",
        type=str,
        default=None,
        help="Hex-encoded block file (for inspect mode; default: stdin)"
    )

    args = parser.parse_args(argv)
    logger = JsonLinesLogger(sys.stdout)

    if args.mode == "test":
        print("Running all tests...\n")
        return run_tests()

    if args.mode == "inspect":
        if args.input:
            try:
                with open(args.input, "r") as f:
                    raw = f.read()
            except IOError as e:
                print(f"Error opening input file: {e}", file=sys.stderr)
                return 1
        else:
            raw = sys.stdin.read()
        return inspect_block(raw, logger)

    try:
        if args.mode == "genesis":
            block = build_genesis(args.config)
        else:
            block = build_sample(args.config, args.seed, args.number, args.txs)
    except ConfigError as e:
        print(f"Invalid config at {args.config}: {e}", file=sys.stderr)
        return 1
    emit_block(block, logger)
    return 0


if __name__ == "__main__":
    sys.exit(main())
