# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# ova2scale/orchestrator/discovery.py
"""
Migration candidate discovery.

A VM name is a candidate when both halves exist:
  - <ova_dir>/<vm>/ holds at least one *.ovf
  - <scale_dir>/<vm>/<vm>.xml exists
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from ..config.migration_config import MigrationConfig
from ..core.exceptions import DiscoveryError, ParseError
from ..core.logger import Log


class VMDiscovery:
    def __init__(self, logger: logging.Logger, config: MigrationConfig):
        self.logger = logger
        self.config = config

    def ovf_descriptors(self, vm: str) -> List[Path]:
        return sorted(self.config.source_dir(vm).glob("*.ovf"))

    def find_ovf(self, vm: str) -> Path:
        """First OVF (by name) in the VM's export directory."""
        ovfs = self.ovf_descriptors(vm)
        if not ovfs:
            raise ParseError(3, f"no OVF descriptor in {self.config.source_dir(vm)}", context={"vm": vm})
        if len(ovfs) > 1:
            Log.warn(self.logger, f"{len(ovfs)} OVF files found, using {ovfs[0].name}", vm=vm)
        return ovfs[0]

    def is_candidate(self, vm: str) -> bool:
        return bool(self.ovf_descriptors(vm)) and self.config.descriptor_path(vm).is_file()

    def discover(self) -> List[str]:
        """
        Sorted candidate names.

        Raises:
            DiscoveryError: ova_dir unreadable, or no candidates at all.
        """
        root = self.config.ova_dir
        try:
            entries = sorted(p for p in root.iterdir() if p.is_dir())
        except OSError as e:
            raise DiscoveryError(2, f"cannot scan {root}: {e}", cause=e, context={"ova_dir": str(root)})

        out: List[str] = []
        for d in entries:
            vm = d.name
            if not self.ovf_descriptors(vm):
                Log.trace(self.logger, "skip %s: no *.ovf", vm)
                continue
            if not self.config.descriptor_path(vm).is_file():
                Log.trace(self.logger, "skip %s: no %s", vm, self.config.descriptor_path(vm))
                continue
            out.append(vm)

        if not out:
            raise DiscoveryError(
                2,
                f"no valid VM dirs beneath {root} (need *.ovf there and <vm>/<vm>.xml under {self.config.scale_dir})",
                context={"ova_dir": str(root), "scale_dir": str(self.config.scale_dir)},
            )

        self.logger.debug("Discovered %d candidate(s): %s", len(out), out)
        return out
