# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# ova2scale/orchestrator/materializer.py
"""
Disk materialization: turns a CopyPlan into files in the staging directory.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List

from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)

from ..config.migration_config import MigrationConfig
from ..core.exceptions import CopyError
from ..core.file_ops import copy_file_chunked, safe_unlink
from ..core.logger import Log, is_tty
from ..core.utils import U
from .pairing import CopyPair, CopyPlan


class DiskMaterializer:
    """
    Executes (or, in dry-run, only reports) a CopyPlan.

    Fail-fast per VM: the first failing pair raises CopyError and the rest of
    the plan is not attempted. A failed copy never leaves its destination
    file behind.
    """

    def __init__(self, logger: logging.Logger, config: MigrationConfig):
        self.logger = logger
        self.config = config

    @property
    def dry_run(self) -> bool:
        return self.config.dry_run

    def purge_stale_images(self, staging_dir: Path) -> List[Path]:
        """Delete existing ``*<ext>`` images in ``staging_dir`` so stale disks cannot linger."""
        removed: List[Path] = []
        for p in sorted(Path(staging_dir).glob(f"*{self.config.disk_extension}")):
            if not p.is_file():
                continue
            if self.dry_run:
                self.logger.info("[dry-run] delete %s", p.name)
                removed.append(p)
                continue
            try:
                safe_unlink(p)
            except OSError as e:
                raise CopyError(5, f"cannot remove stale image {p}: {e}", cause=e, context={"path": str(p)})
            self.logger.info("🗑 removed %s", p.name)
            removed.append(p)
        return removed

    def materialize(self, plan: CopyPlan) -> int:
        """Run every pair of ``plan``; returns the number of pairs done (or planned in dry-run)."""
        done = 0
        for idx, pair in enumerate(plan, start=1):
            if self.dry_run:
                self.logger.info("[dry-run] copy %s → %s", pair.source.name, pair.dest.name)
            else:
                self._copy_pair(pair, idx, len(plan))
            done += 1
        return done

    def _copy_pair(self, pair: CopyPair, idx: int, total: int) -> None:
        if not pair.source.is_file():
            raise CopyError(
                5,
                f"source disk not found: {pair.source}",
                context={"source": str(pair.source), "dest": str(pair.dest)},
            )

        size = pair.source.stat().st_size
        Log.trace(self.logger, "copy %d/%d %s (%s) -> %s", idx, total, pair.source, U.human_bytes(size), pair.dest)

        try:
            if is_tty(sys.stderr):
                with Progress(
                    TextColumn("{task.description}"),
                    BarColumn(),
                    DownloadColumn(),
                    TransferSpeedColumn(),
                    TextColumn("{task.percentage:>3.0f}%"),
                    TimeElapsedColumn(),
                    TimeRemainingColumn(),
                ) as progress:
                    task = progress.add_task(f"[{idx}/{total}] {pair.source.name}", total=size or None)
                    copy_file_chunked(
                        pair.source,
                        pair.dest,
                        on_progress=lambda n: progress.update(task, advance=n),
                    )
            else:
                copy_file_chunked(pair.source, pair.dest)
        except OSError as e:
            raise CopyError(
                5,
                f"copy {pair.source.name} → {pair.dest.name} failed: {e}",
                cause=e,
                context={"source": str(pair.source), "dest": str(pair.dest)},
            )

        self.logger.info("✓ %s → %s (%s)", pair.source.name, pair.dest.name, U.human_bytes(size))
