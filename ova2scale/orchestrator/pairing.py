# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# ova2scale/orchestrator/pairing.py
"""
Positional pairing of OVF disk files with Scale disk identifiers.

Index i of the OVF list goes to index i of the Scale list. When the counts
differ the shorter length wins and the rest is left unpaired; a partial
import is still useful to the operator, so this only warns.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from ..config.migration_config import DEFAULT_DISK_EXTENSION
from ..core.exceptions import ParseError
from ..core.logger import Log


@dataclass(frozen=True)
class CopyPair:
    source: Path
    dest: Path


@dataclass(frozen=True)
class CopyPlan:
    vm: str
    pairs: List[CopyPair] = field(default_factory=list)
    source_count: int = 0
    dest_count: int = 0
    unpaired_sources: List[str] = field(default_factory=list)
    unpaired_dest_ids: List[str] = field(default_factory=list)

    @property
    def mismatched(self) -> bool:
        return self.source_count != self.dest_count

    def __len__(self) -> int:
        return len(self.pairs)

    def __iter__(self) -> Iterator[CopyPair]:
        return iter(self.pairs)


def _source_path(vm: str, source_dir: Path, href: str) -> Path:
    """Join an OVF href onto source_dir; hrefs that leave the directory are rejected."""
    root = os.path.normpath(str(source_dir))
    joined = os.path.normpath(os.path.join(root, href))
    if os.path.isabs(href) or os.path.commonpath([root, joined]) != root:
        raise ParseError(3, f"OVF disk href escapes {source_dir}: {href}", context={"vm": vm, "href": href})
    return Path(joined)


def build_copy_plan(
    vm: str,
    source_hrefs: Sequence[str],
    dest_ids: Sequence[str],
    source_dir: Path,
    staging_dir: Path,
    *,
    extension: str = DEFAULT_DISK_EXTENSION,
    logger: Optional[logging.Logger] = None,
) -> CopyPlan:
    n = min(len(source_hrefs), len(dest_ids))

    if len(source_hrefs) != len(dest_ids) and logger is not None:
        Log.warn(
            logger,
            f"mismatch: {len(source_hrefs)} OVF vs {len(dest_ids)} Scale disk(s), pairing first {n}",
            vm=vm,
        )

    pairs = [
        CopyPair(
            source=_source_path(vm, source_dir, source_hrefs[i]),
            dest=Path(staging_dir) / f"{dest_ids[i]}{extension}",
        )
        for i in range(n)
    ]

    return CopyPlan(
        vm=vm,
        pairs=pairs,
        source_count=len(source_hrefs),
        dest_count=len(dest_ids),
        unpaired_sources=list(source_hrefs[n:]),
        unpaired_dest_ids=list(dest_ids[n:]),
    )
