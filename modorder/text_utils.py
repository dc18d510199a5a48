from __future__ import annotations

import re
from typing import Iterable

WHITESPACE_PATTERN = re.compile(r"\s+")
ARCHIVE_SUFFIX = ".zip"


def normalize_name(raw: str) -> str:
    return WHITESPACE_PATTERN.sub(" ", raw).strip().lower()


def is_archive_name(name: str) -> bool:
    return name.lower().endswith(ARCHIVE_SUFFIX)


def format_names(names: Iterable[str]) -> str:
    return ", ".join(names)
