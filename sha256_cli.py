"""SHA-256 built from the padding, schedule and compression stages.

This module provides:

- `sha256(data: bytes) -> bytes`: compute the SHA-256 digest of arbitrary data.
- `sha256_hex(data: bytes) -> str`: the same digest as 64 lowercase hex digits.
- CLI usage: `python sha256_cli.py "message"` prints the hex digest of the
  UTF-8 encoding of `"message"`; `-f path` hashes the raw bytes of a file.
"""

from __future__ import annotations

import argparse
import functools
import hashlib
import logging
import os
import sys
from typing import List, Optional

from compress import H0, HashState, compress_block
from config import Settings, load_config
from observer import HashObserver, TraceRecorder
from padding import pad_message, split_blocks
from schedule import build_message_schedule

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_MISMATCH = 2


def _finalize_digest(state: HashState) -> bytes:
    """Convert the final hash state into the 32-byte SHA-256 digest."""
    return b"".join(word.to_bytes(4, byteorder="big") for word in state)


def sha256(data: bytes, observer: Optional[HashObserver] = None) -> bytes:
    """Compute the SHA-256 digest of `data`.

    High-level flow:

    1. Pad the message to a whole number of 64-byte blocks.
    2. For each block, in order, expand the 64-word schedule and fold it
       into the running hash state with `compress_block`.
    3. Serialize the final eight words big-endian.

    When an `observer` is given it receives read-only snapshots of every
    intermediate value.
    """
    padded = pad_message(data)
    if observer is not None:
        observer.on_message(data)
        observer.on_padded(padded)

    state: HashState = H0
    blocks = split_blocks(padded)
    logger.debug("hashing %d bytes in %d blocks", len(data), len(blocks))

    for index, block in enumerate(blocks):
        ws = build_message_schedule(block)

        on_round = None
        if observer is not None:
            observer.on_schedule(index, ws)
            if observer.wants_rounds:
                on_round = functools.partial(observer.on_round, index)

        state = compress_block(state, ws, on_round=on_round)

        if observer is not None:
            observer.on_block(index, state)

    digest = _finalize_digest(state)
    if observer is not None:
        observer.on_digest(digest)
    return digest


def sha256_hex(data: bytes, observer: Optional[HashObserver] = None) -> str:
    """Return the digest of `data` as 64 lowercase hex characters."""
    return sha256(data, observer).hex()


def sha256_string(text: str, encoding: str = "utf-8") -> bytes:
    """Compute the SHA-256 digest of a string in the given encoding."""
    return sha256(text.encode(encoding))


def reference_hexdigest(data: bytes) -> str:
    """Hex digest from the platform `hashlib`, for cross-checking."""
    return hashlib.sha256(data).hexdigest()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sha256_cli",
        description="Compute SHA-256 digests with a from-scratch pipeline",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("message", nargs="?", help="Text to hash")
    source.add_argument("-f", "--file", help="Hash the raw bytes of this file")
    parser.add_argument("--trace", help="Write a YAML trace of intermediate values to this path")
    parser.add_argument(
        "--rounds",
        action="store_true",
        default=None,
        help="Include per-round working registers in the trace",
    )
    parser.add_argument(
        "--verify",
        action="store_true",
        default=None,
        help="Compare the digest with hashlib and fail on mismatch",
    )
    parser.add_argument("--config", help="Settings file (default: ./sha256.yaml if present)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def _read_input(args: argparse.Namespace, settings: Settings) -> bytes:
    if args.file is not None:
        with open(args.file, "rb") as f:
            return f.read()
    return args.message.encode(settings.encoding)


def _trace_path(path: str, settings: Settings) -> str:
    if settings.trace_dir and not os.path.isabs(path):
        os.makedirs(settings.trace_dir, exist_ok=True)
        return os.path.join(settings.trace_dir, path)
    return path


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point.

    Usage:
        python sha256_cli.py "message"
        python sha256_cli.py -f path/to/file
        python sha256_cli.py "abc" --trace abc.yaml --rounds --verify

    Exit status is 0 on success, 1 on bad input or configuration and 2 when
    ``--verify`` finds a mismatch with hashlib.
    """
    if argv is None:
        argv = sys.argv[1:]

    args = _build_parser().parse_args(argv)

    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        settings = load_config(
            args.config,
            overrides={
                "record_rounds": args.rounds,
                "verify": args.verify,
                "log_level": "DEBUG" if args.verbose else None,
            },
        )
    except ValueError as e:
        logger.error("Error loading configuration: %s", e)
        return EXIT_ERROR

    logging.getLogger().setLevel(settings.log_level)

    try:
        data = _read_input(args, settings)
    except OSError as e:
        logger.error("Error reading file '%s': %s", args.file, e)
        return EXIT_ERROR
    except (UnicodeEncodeError, LookupError) as e:
        logger.error("Cannot encode message as %s: %s", settings.encoding, e)
        return EXIT_ERROR

    recorder = TraceRecorder(record_rounds=settings.record_rounds) if args.trace else None

    try:
        digest_hex = sha256_hex(data, recorder)
    except ValueError as e:
        logger.error("Cannot hash input: %s", e)
        return EXIT_ERROR

    print(digest_hex)

    if recorder is not None:
        path = args.trace
        try:
            path = _trace_path(args.trace, settings)
            recorder.dump_yaml(path)
        except OSError as e:
            logger.error("Error writing trace '%s': %s", path, e)
            return EXIT_ERROR
        logger.info("wrote trace for %d blocks to %s", len(recorder.blocks), path)

    if settings.verify:
        expected = reference_hexdigest(data)
        if expected != digest_hex:
            logger.error("Digest mismatch: hashlib reports %s", expected)
            return EXIT_MISMATCH
        logger.info("digest matches hashlib")

    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
