"""Load known-answer vectors from YAML and check a digest function against them.

The default vectors are kept in this module as a YAML document so that an
installed copy can run them without any data file. Each entry gives the
message either as `message` (UTF-8 text) or `message_hex`, and the expected
digest as 64 lowercase hex characters. The first four are the SHA-256
examples published with FIPS 180-4.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Union

import yaml


logger = logging.getLogger(__name__)

BUNDLED = "<bundled>"

BUNDLED_VECTORS_YAML = """\
vectors:
  - name: empty
    message: ""
    digest: "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
  - name: abc
    message: "abc"
    digest: "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
  - name: 448-bit
    message: "abcdbcdecdefdefgefghfghighijhijkijkljklmklmnlmnomnopnopq"
    digest: "248d6a61d20638b8e5c026930c3e6039a33ce45964ff2167f6ecedd419db06c1"
  - name: 896-bit
    message: "abcdefghbcdefghicdefghijdefghijkefghijklfghijklmghijklmnhijklmnoijklmnopjklmnopqklmnopqrlmnopqrsmnopqrstnopqrstu"
    digest: "cf5b16a778af8380036ce59e7b0492370b249b11e8f07a51afac45037afee9d1"
  - name: hello
    message_hex: "68656c6c6f"
    digest: "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"
  - name: quick-brown-fox
    message: "The quick brown fox jumps over the lazy dog"
    digest: "d7a8fbb307d7809469ca9abcb0082e4f8d5651e46d3cdb762d02d0bf37c9e592"
"""


@dataclass(frozen=True)
class KnownAnswer:
    name: str
    message: bytes
    digest: str


@dataclass(frozen=True)
class VectorResult:
    vector: KnownAnswer
    actual: str

    @property
    def passed(self) -> bool:
        return self.actual == self.vector.digest


def _parse_entry(index: int, entry: dict) -> KnownAnswer:
    if not isinstance(entry, dict):
        raise ValueError(f"vector #{index} must be a mapping, got {type(entry).__name__}")

    name = str(entry.get("name", f"vector-{index}"))
    if "message" in entry and "message_hex" in entry:
        raise ValueError(f"vector '{name}' sets both message and message_hex")
    if "message_hex" in entry:
        message = bytes.fromhex(str(entry["message_hex"]))
    elif "message" in entry:
        message = str(entry["message"]).encode("utf-8")
    else:
        raise ValueError(f"vector '{name}' has no message or message_hex")

    digest = str(entry.get("digest", "")).lower()
    if len(digest) != 64 or any(ch not in "0123456789abcdef" for ch in digest):
        raise ValueError(f"vector '{name}' digest must be 64 hex characters")

    return KnownAnswer(name=name, message=message, digest=digest)


def parse_vectors(document, source: str = BUNDLED) -> List[KnownAnswer]:
    """Turn a parsed YAML document into known-answer vectors."""
    if not isinstance(document, dict) or not isinstance(document.get("vectors"), list):
        raise ValueError(f"{source}: expected a top-level 'vectors' list")

    vectors = [_parse_entry(i, entry) for i, entry in enumerate(document["vectors"])]
    logger.debug("loaded %d vectors from %s", len(vectors), source)
    return vectors


def load_vectors(path: Union[str, Path, None] = None) -> List[KnownAnswer]:
    """Read known-answer vectors from a YAML file, or the bundled ones if no path is given."""
    if path is None or path == BUNDLED:
        return parse_vectors(yaml.safe_load(BUNDLED_VECTORS_YAML))

    with open(path, "r", encoding="utf-8") as f:
        document = yaml.safe_load(f)
    return parse_vectors(document, str(path))


def run_vectors(
    vectors: List[KnownAnswer], digest_fn: Callable[[bytes], bytes]
) -> List[VectorResult]:
    """Hash every vector message and pair it with the expected digest."""
    return [VectorResult(vector=v, actual=digest_fn(v.message).hex()) for v in vectors]


def summarize(results: List[VectorResult]) -> Optional[str]:
    """Return a failure summary, or None if every vector passed."""
    failed = [r.vector.name for r in results if not r.passed]
    if not failed:
        return None
    return f"{len(failed)} of {len(results)} vectors failed: {', '.join(failed)}"
