# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# ova2scale/orchestrator/orchestrator.py

from __future__ import annotations

import logging
import traceback
from dataclasses import dataclass
from typing import List, Optional

from ..cli.selection import InputFn, confirm_import, prompt_selection
from ..config.migration_config import ImportMode, MigrationConfig, SelectionMode
from ..core.exceptions import VMError, format_exception_for_cli
from ..core.logger import Log
from ..descriptors.ovf_reader import read_ovf_disk_files
from ..descriptors.scale_reader import read_scale_disk_ids
from ..scale.import_client import ScaleImportClient
from .discovery import VMDiscovery
from .materializer import DiskMaterializer
from .metadata_patcher import MetadataPatcher
from .pairing import build_copy_plan


@dataclass
class VMResult:
    vm: str
    ok: bool = False
    planned: int = 0
    copied: int = 0
    patched: bool = False
    imported: bool = False
    task_tag: Optional[str] = None
    created_uuid: Optional[str] = None
    error: Optional[str] = None


class Orchestrator:
    """
    Main pipeline: discover → select → per VM (read, pair, copy, tag, import).

    VMs run one after another. A VM that fails is logged and recorded; the
    next VM still runs. Only run-level errors (Fatal) escape ``run()``.
    """

    def __init__(
        self,
        logger: logging.Logger,
        config: MigrationConfig,
        *,
        discovery: Optional[VMDiscovery] = None,
        materializer: Optional[DiskMaterializer] = None,
        patcher: Optional[MetadataPatcher] = None,
        import_client: Optional[ScaleImportClient] = None,
        input_fn: InputFn = input,
        verbose: int = 0,
    ):
        self.logger = logger
        self.config = config
        self.discovery = discovery or VMDiscovery(logger, config)
        self.materializer = materializer or DiskMaterializer(logger, config)
        self.patcher = patcher or MetadataPatcher(logger, config)
        self._import_client = import_client
        self.input_fn = input_fn
        self.verbose = verbose
        self.results: List[VMResult] = []

        Log.trace(
            self.logger,
            "🧠 Orchestrator init: ova_dir=%s scale_dir=%s dry_run=%s selection=%s import=%s",
            config.ova_dir,
            config.scale_dir,
            config.dry_run,
            config.selection_mode.value,
            config.import_mode.value,
        )

    @property
    def import_client(self) -> ScaleImportClient:
        if self._import_client is None:
            self._import_client = ScaleImportClient(self.logger, self.config)
        return self._import_client

    def select(self, candidates: List[str]) -> List[str]:
        if self.config.selection_mode is SelectionMode.EXPLICIT:
            for vm in self.config.vms:
                if vm not in candidates:
                    Log.warn(self.logger, f"{vm} is not a discovered candidate; trying anyway", vm=vm)
            return list(self.config.vms)
        return prompt_selection(candidates, input_fn=self.input_fn)

    def _should_import(self, vm: str) -> bool:
        if self.config.dry_run:
            return False
        mode = self.config.import_mode
        if mode is ImportMode.AUTO:
            return True
        if mode is ImportMode.NEVER:
            return False
        return confirm_import(vm, input_fn=self.input_fn)

    def process_vm(self, vm: str, result: Optional[VMResult] = None) -> VMResult:
        """
        Run the full pipeline for one VM; raises VMError on the first failure.
        ``result`` is filled in as steps complete, so a caller holding it
        still sees partial progress after an error.
        """
        result = result or VMResult(vm=vm)
        log = Log.bind(self.logger, vm=vm)
        Log.banner(self.logger, vm)

        source_dir = self.config.source_dir(vm)
        staging_dir = self.config.staging_dir(vm)
        descriptor = self.config.descriptor_path(vm)

        ovf = self.discovery.find_ovf(vm)
        hrefs = read_ovf_disk_files(ovf, self.logger)
        dest_ids = read_scale_disk_ids(descriptor, self.logger)
        log.debug("OVF %s lists %d disk(s); %s lists %d", ovf.name, len(hrefs), descriptor.name, len(dest_ids))

        plan = build_copy_plan(
            vm,
            hrefs,
            dest_ids,
            source_dir,
            staging_dir,
            extension=self.config.disk_extension,
            logger=self.logger,
        )
        result.planned = len(plan)
        if plan.unpaired_sources:
            log.info("unpaired OVF disk(s): %s", ", ".join(plan.unpaired_sources))
        if plan.unpaired_dest_ids:
            log.info("unpaired Scale disk id(s): %s", ", ".join(plan.unpaired_dest_ids))

        if not self.config.keep_existing_images:
            self.materializer.purge_stale_images(staging_dir)

        result.copied = self.materializer.materialize(plan)

        self.patcher.patch(descriptor)
        result.patched = True

        if self._should_import(vm):
            imp = self.import_client.import_vm(vm)
            result.imported = True
            result.task_tag = imp.task_tag
            result.created_uuid = imp.created_uuid

        result.ok = True
        return result

    def _run_one(self, vm: str) -> VMResult:
        result = VMResult(vm=vm)
        try:
            return self.process_vm(vm, result)
        except VMError as e:
            Log.fail(self.logger, f"{vm}: {format_exception_for_cli(e, verbose=self.verbose)}", vm=vm)
            result.error = str(e)
        except Exception as e:
            Log.fail(self.logger, f"{vm}: UNHANDLED {type(e).__name__}: {e}", vm=vm)
            self.logger.debug(traceback.format_exc())
            result.error = f"{type(e).__name__}: {e}"
        return result

    def _summary(self) -> None:
        Log.banner(self.logger, "Summary")
        verb = "planned" if self.config.dry_run else "copied"
        for r in self.results:
            if not r.ok:
                self.logger.error("❌ %s: %s (%d/%d disk(s) %s)", r.vm, r.error, r.copied, r.planned, verb)
                continue
            line = f"{r.vm}: {r.copied}/{r.planned} disk(s) {verb}"
            if r.imported:
                line += f", import task {r.task_tag} (UUID {r.created_uuid})"
            Log.ok(self.logger, line)

    def run(self) -> int:
        Log.banner(self.logger, "ova2scale" + (" (dry-run)" if self.config.dry_run else ""))

        candidates = self.discovery.discover()
        vms = [vm.strip() for vm in self.select(candidates) if vm.strip()]
        if not vms:
            self.logger.info("nothing selected – exiting")
            return 0

        for vm in vms:
            self.results.append(self._run_one(vm))

        self._summary()
        return 0 if all(r.ok for r in self.results) else 1
