"""
Minified and bundled file detection.

Generated assets (minified JavaScript, CSS bundles) produce useless chunks:
one enormous line, no structure worth indexing. Callers ask ``is_minified``
before chunking and skip or fall back to file-level chunking.

Signals, first hit wins:

1. the path contains a dot-delimited ``.min.`` token
2. the file name ends in ``.min.<ext>`` or ``.bundle.<ext>`` for a web asset
3. content heuristics: long average lines, a single huge line, or (for
   files of at least ``min_size_for_whitespace_check`` bytes) almost no
   whitespace

The checks are pure byte arithmetic and never raise, whatever the input.
"""

from dataclasses import dataclass
from pathlib import PurePath
from typing import Optional, Tuple

from chunkforge.core.config import MinifiedConfig

MINIFIED_MARKERS: Tuple[str, ...] = (".min", ".bundle")
MINIFIED_SUFFIX_EXTENSIONS: Tuple[str, ...] = (".js", ".mjs", ".cjs", ".css", ".ts")

_WHITESPACE = (b" ", b"\t", b"\n", b"\r")


@dataclass(frozen=True)
class MinifiedThresholds:
    """Content heuristic thresholds."""

    max_avg_line_length: int = 500
    max_single_line_size: int = 10 * 1024
    min_whitespace_ratio: float = 0.05
    min_size_for_whitespace_check: int = 1024

    @classmethod
    def default(cls) -> "MinifiedThresholds":
        return cls()

    @classmethod
    def from_config(cls, config: MinifiedConfig) -> "MinifiedThresholds":
        return cls(
            max_avg_line_length=config.max_avg_line_length,
            max_single_line_size=config.max_single_line_size,
            min_whitespace_ratio=config.min_whitespace_ratio,
            min_size_for_whitespace_check=config.min_size_for_whitespace_check,
        )


def is_minified_extension(path: Optional[str]) -> bool:
    """True if the file name ends with a minified or bundle marker.

    ``app.min.js`` and ``vendor.bundle.css`` match; ``app.min.js.map`` does
    not, since the marker is followed by another suffix.
    """
    if not path:
        return False
    name = PurePath(path).name.lower()
    for ext in MINIFIED_SUFFIX_EXTENSIONS:
        if not name.endswith(ext):
            continue
        stem = name[: -len(ext)]
        for marker in MINIFIED_MARKERS:
            if stem.endswith(marker) and len(stem) > len(marker):
                return True
    return False


def has_min_token(path: Optional[str]) -> bool:
    """True if ``.min.`` appears as a dot-delimited token anywhere in the path."""
    if not path:
        return False
    return ".min." in path.lower()


def is_minified(content: Optional[bytes], path: Optional[str]) -> bool:
    """Check ``content`` against the default thresholds."""
    return is_minified_with_thresholds(content, path, MinifiedThresholds.default())


def is_minified_with_thresholds(
    content: Optional[bytes],
    path: Optional[str],
    thresholds: MinifiedThresholds,
) -> bool:
    """Check ``content`` against explicit thresholds.

    Empty or missing content or path is never minified.
    """
    if not content or not path:
        return False
    if not isinstance(content, (bytes, bytearray)):
        return False

    if has_min_token(path) or is_minified_extension(path):
        return True

    return _content_looks_minified(bytes(content), thresholds)


def _content_looks_minified(content: bytes, thresholds: MinifiedThresholds) -> bool:
    size = len(content)

    lines = content.split(b"\n")
    if len(lines) > 1 and not lines[-1]:
        lines.pop()
    line_count = max(1, len(lines))

    if size / line_count > thresholds.max_avg_line_length:
        return True

    if max(len(line) for line in lines) > thresholds.max_single_line_size:
        return True

    if size >= thresholds.min_size_for_whitespace_check:
        whitespace = sum(content.count(ch) for ch in _WHITESPACE)
        if whitespace / size < thresholds.min_whitespace_ratio:
            return True

    return False
