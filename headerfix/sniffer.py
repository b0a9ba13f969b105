"""Bounded-prefix inspection of candidate files."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from .errors import EmptyFileError
from .models import SniffResult

PREFIX_SIZE = 624

APACHE_LICENSE_URL = b"http://www.apache.org/licenses/LICENSE-2.0"
ALL_RIGHTS_RESERVED = b"all rights reserved"
DO_NOT_EDIT = b"DO NOT EDIT!"

PrefixPredicate = Callable[[bytes], bool]


def contains_license(prefix: bytes) -> bool:
    return ALL_RIGHTS_RESERVED in prefix.lower() or APACHE_LICENSE_URL in prefix


def is_auto_generated(prefix: bytes) -> bool:
    return DO_NOT_EDIT in prefix


def sniff(
    path: Path | str,
    is_licensed: PrefixPredicate = contains_license,
    is_generated: PrefixPredicate = is_auto_generated,
) -> SniffResult:
    """Read up to PREFIX_SIZE bytes of `path` and classify them.

    The returned handle stays open, positioned after the prefix; the caller
    must close it. Raises OSError when the file cannot be opened or is empty.
    """
    handle = open(path, "rb")
    try:
        prefix = handle.read(PREFIX_SIZE)
        if not prefix:
            raise EmptyFileError(f"no bytes to sniff in {path}")
        licensed = is_licensed(prefix)
        generated = is_generated(prefix)
    except BaseException:
        handle.close()
        raise
    return SniffResult(prefix=prefix, handle=handle, licensed=licensed, generated=generated)


__all__ = [
    "PREFIX_SIZE",
    "contains_license",
    "is_auto_generated",
    "sniff",
]
