"""SHA-256 digest built from `padding`, `schedule` and `compress`.

This module provides:

- `sha256(data: bytes) -> bytes`: compute the SHA-256 digest of arbitrary data.
- `Sha256Computation`: the per-message pipeline (pad, compress each block,
  finalize) with its own hash state.
- CLI usage: `python sha256_cli.py "message"` prints the hex digest of the
  UTF-8 encoding of `"message"`; `-f path` hashes a file (`-f -` for stdin).
"""

from __future__ import annotations

import argparse
import base64
import enum
import logging
import sys
from typing import List, Optional, Sequence, Tuple

import yaml

from compress import INITIAL_HASH, State, compress64, update_hash_state
from errors import DigestError
from input_source import BytesLike, as_message_bytes, from_text, read_file, read_stream
from padding import pad_message, pad_message_bits
from schedule import build_message_schedule, split_into_blocks
from vectors import BUNDLED, load_vectors, run_vectors, summarize


logger = logging.getLogger(__name__)

DIGEST_FORMATS = ("hex", "base64")


class Stage(enum.Enum):
    INIT = "init"
    PADDING_DONE = "padding_done"
    SCHEDULING = "scheduling"
    COMPRESSING = "compressing"
    FINALIZED = "finalized"


class Sha256Computation:
    """One SHA-256 computation over a fully buffered message.

    The hash state starts from `INITIAL_HASH` for every instance and is only
    replaced by `compress_block`. Stages must run in order:
    `pad` -> (`schedule_block` -> `compress_block`) for each block, in
    order -> `finalize`. `compress_block` schedules the next block itself
    when called straight after padding or after the previous block.
    """

    def __init__(self, track_h: bool = False) -> None:
        self.state: State = tuple(INITIAL_HASH)
        self.stage = Stage.INIT
        self.track_h = track_h
        self.h_values: List[List[int]] = []
        self._blocks: List[bytes] = []
        self._cursor = 0
        self._schedule: List[int] = []

    def _require(self, *allowed: Stage) -> None:
        if self.stage not in allowed:
            raise RuntimeError(f"cannot run this step in stage {self.stage.value}")

    @property
    def blocks_remaining(self) -> int:
        return len(self._blocks) - self._cursor

    def pad(self, message: bytes, length_bits: Optional[int] = None) -> List[bytes]:
        """Pad the message and return its 64-byte blocks."""
        self._require(Stage.INIT)
        if length_bits is None:
            padded = pad_message(message)
        else:
            padded = pad_message_bits(message, length_bits)
        self._blocks = split_into_blocks(padded)
        self.stage = Stage.PADDING_DONE
        return list(self._blocks)

    def schedule_block(self, block: Optional[bytes] = None) -> List[int]:
        """Build the message schedule of the next unprocessed block.

        If `block` is given it must be that next block.
        """
        self._require(Stage.PADDING_DONE, Stage.COMPRESSING)
        if self.blocks_remaining == 0:
            raise RuntimeError("every block has already been compressed")
        expected = self._blocks[self._cursor]
        if block is not None and bytes(block) != expected:
            raise RuntimeError(f"block {self._cursor} does not match the padded message")
        self._schedule = build_message_schedule(expected)
        self.stage = Stage.SCHEDULING
        return list(self._schedule)

    def compress_block(self, block: Optional[bytes] = None) -> State:
        """Fold the next block into the running hash state."""
        if self.stage in (Stage.PADDING_DONE, Stage.COMPRESSING):
            self.schedule_block(block)
        self._require(Stage.SCHEDULING)
        if block is not None and bytes(block) != self._blocks[self._cursor]:
            raise RuntimeError(f"block {self._cursor} does not match the scheduled block")

        if self.track_h:
            working, h_values = compress64(*self.state, self._schedule, track_h=True)
            self.h_values.append(h_values)
        else:
            working = compress64(*self.state, self._schedule)
        self.state = update_hash_state(self.state, working)
        self._cursor += 1
        self.stage = Stage.COMPRESSING
        return self.state

    def finalize(self) -> bytes:
        """Serialize h0..h7 big-endian into the 32-byte digest."""
        self._require(Stage.COMPRESSING)
        if self.blocks_remaining:
            raise RuntimeError(f"{self.blocks_remaining} blocks have not been compressed")
        self.stage = Stage.FINALIZED
        return finalize_digest(self.state)

    def run(self, message: bytes, length_bits: Optional[int] = None) -> bytes:
        blocks = self.pad(message, length_bits)
        for _ in blocks:
            self.compress_block()
        logger.debug("compressed %d blocks", len(blocks))
        return self.finalize()


def finalize_digest(state: Sequence[int]) -> bytes:
    """Convert a final chaining value H_N into the 32-byte SHA-256 digest."""
    if len(state) != 8:
        raise ValueError(f"hash state must have 8 words, got {len(state)}")
    return b"".join(word.to_bytes(4, byteorder="big") for word in state)


def sha256(data: BytesLike) -> bytes:
    """Compute the SHA-256 digest of `data`."""
    return Sha256Computation().run(as_message_bytes(data))


def sha256_hex(data: BytesLike) -> str:
    """Return the SHA-256 digest of `data` as 64 lowercase hex characters."""
    return sha256(data).hex()


def sha256_bits(message_bytes: bytes, length_bits: int) -> bytes:
    """Digest of the first `length_bits` bits of `message_bytes`.

    Runs a fresh `Sha256Computation` with bit-level padding, so the last
    byte may be partly used; its unused low bits do not affect the result.
    """
    return Sha256Computation().run(as_message_bytes(message_bytes), length_bits)


def sha256_with_h_tracking(data: BytesLike) -> Tuple[bytes, List[List[int]]]:
    """Digest of `data` plus the `h` register recorded by `Sha256Computation`.

    The second element holds one list per block, each with the 64 values
    `h` takes after every round. This is what `--trace` prints.
    """
    computation = Sha256Computation(track_h=True)
    digest = computation.run(as_message_bytes(data))
    return digest, computation.h_values


def format_digest(digest: bytes, fmt: str = "hex") -> str:
    """Render a digest for display."""
    if fmt == "hex":
        return digest.hex()
    if fmt == "base64":
        return base64.b64encode(digest).decode("ascii")
    raise ValueError(f"unknown digest format {fmt!r}, expected one of {DIGEST_FORMATS}")


def _trace_document(digest: bytes, h_values_per_block: List[List[int]]) -> dict:
    return {
        "digest_hex": digest.hex(),
        "blocks": [
            {"block_index": i, "h_values": [f"{h:08x}" for h in h_values]}
            for i, h_values in enumerate(h_values_per_block)
        ],
    }


def _self_test(path) -> int:
    results = run_vectors(load_vectors(path), sha256)
    for result in results:
        status = "PASS" if result.passed else "FAIL"
        print(f"[{status}] {result.vector.name}: {result.actual}")
    failure = summarize(results)
    if failure:
        sys.stderr.write(failure + "\n")
        return 1
    print(f"All {len(results)} vectors passed")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sha256-digest",
        description="Compute the SHA-256 digest of a message, file or stdin",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "message",
        nargs="?",
        help="Text to hash (UTF-8 encoded)",
    )
    source.add_argument(
        "-f",
        "--file",
        help="Hash the raw bytes of FILE ('-' reads stdin)",
    )
    source.add_argument(
        "--self-test",
        nargs="?",
        const=BUNDLED,
        metavar="VECTORS",
        help="Check known-answer vectors from a YAML file (default: the bundled FIPS 180-4 vectors)",
    )
    parser.add_argument(
        "--format",
        choices=DIGEST_FORMATS,
        default="hex",
        help="Digest output format (default: hex)",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Also print the h register after every round, as YAML",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug messages to stderr",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Usage:
        python sha256_cli.py "message"
        python sha256_cli.py -f path/to/file
        python sha256_cli.py -f - < path/to/file
        python sha256_cli.py --self-test [vectors.yaml]

    Prints the digest to stdout and returns the process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.self_test is not None:
        try:
            return _self_test(args.self_test)
        except (OSError, ValueError, yaml.YAMLError) as e:
            sys.stderr.write(f"Error loading vectors '{args.self_test}': {e}\n")
            return 1

    if args.message is None and args.file is None:
        parser.print_usage(sys.stderr)
        return 1

    try:
        if args.file == "-":
            data = read_stream(sys.stdin.buffer)
        elif args.file is not None:
            data = read_file(args.file)
        else:
            data = from_text(args.message)
    except DigestError as e:
        sys.stderr.write(f"Error: {e}\n")
        return 1

    if not args.trace:
        print(format_digest(sha256(data), args.format))
        return 0

    digest, h_values_per_block = sha256_with_h_tracking(data)
    print(format_digest(digest, args.format))
    document = _trace_document(digest, h_values_per_block)
    print(yaml.safe_dump(document, default_flow_style=False, sort_keys=False), end="")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
