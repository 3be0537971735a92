"""Optional hooks for inspecting the pipeline while it runs.

`sha256_cli.sha256` calls an observer, when one is supplied, with
read-only snapshots of the intermediate values: the raw message, the
padded buffer, each block's schedule, the working registers after every
round and the hash state after every block. The hashing code never
depends on any particular consumer.
"""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

import yaml

from padding import BLOCK_SIZE, padding_summary


def _words_hex(words) -> List[str]:
    return [f"{w:08x}" for w in words]


class HashObserver:
    """Base observer; every hook is a no-op."""

    # Per-round callbacks cost 64 calls per block; the pipeline skips them
    # unless this is set.
    wants_rounds = False

    def on_message(self, message: bytes) -> None:
        pass

    def on_padded(self, padded: bytes) -> None:
        pass

    def on_schedule(self, index: int, schedule: Tuple[int, ...]) -> None:
        pass

    def on_round(self, index: int, t: int, registers: Tuple[int, ...]) -> None:
        pass

    def on_block(self, index: int, state: Tuple[int, ...]) -> None:
        pass

    def on_digest(self, digest: bytes) -> None:
        pass


class TraceRecorder(HashObserver):
    """Collect every snapshot into a plain dict suitable for YAML output."""

    def __init__(self, record_rounds: bool = False):
        self.wants_rounds = record_rounds
        self.message: bytes = b""
        self.padded: bytes = b""
        self.blocks: List[Dict[str, Any]] = []
        self.digest: bytes = b""

    def on_message(self, message: bytes) -> None:
        # A new message starts a new trace.
        self.message = bytes(message)
        self.padded = b""
        self.blocks = []
        self.digest = b""

    def on_padded(self, padded: bytes) -> None:
        self.padded = bytes(padded)

    def on_schedule(self, index, schedule):
        self.blocks.append({
            "block_index": index,
            "block_hex": self.padded[index * BLOCK_SIZE : (index + 1) * BLOCK_SIZE].hex(),
            "schedule": _words_hex(schedule),
            "rounds": [],
        })

    def on_round(self, index, t, registers):
        self.blocks[index]["rounds"].append(
            {"round": t, "registers": _words_hex(registers)}
        )

    def on_block(self, index, state):
        self.blocks[index]["state"] = _words_hex(state)

    def on_digest(self, digest: bytes) -> None:
        self.digest = bytes(digest)

    def to_dict(self) -> Dict[str, Any]:
        blocks = []
        for block in self.blocks:
            entry = dict(block)
            if not self.wants_rounds:
                del entry["rounds"]
            blocks.append(entry)

        return {
            "message_hex": self.message.hex(),
            "message_length_bits": len(self.message) * 8,
            "padding": padding_summary(len(self.message)),
            "padded_hex": self.padded.hex(),
            "blocks": blocks,
            "digest_hex": self.digest.hex(),
        }

    def dump_yaml(self, path) -> None:
        with open(path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)
