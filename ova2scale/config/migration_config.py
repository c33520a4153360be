# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# ova2scale/config/migration_config.py
"""
Resolved run configuration.

Built once from the parsed CLI/config namespace and passed into every
component, so nothing downstream reads argparse state or globals.
"""
from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional

from ..core.utils import U

DEFAULT_OVA_DIR = "/data/vms/ova"
DEFAULT_SCALE_DIR = "/data/vms/scale"
DEFAULT_API_URL = "https://192.168.0.1"
DEFAULT_API_USER = "admin"
DEFAULT_API_PASSWORD = "admin"
DEFAULT_API_TIMEOUT_S = 60.0
DEFAULT_DISK_EXTENSION = ".qcow2"


class SelectionMode(str, Enum):
    EXPLICIT = "explicit"  # names given via --vms / config
    INTERACTIVE = "interactive"  # numbered menu on stdin


class ImportMode(str, Enum):
    AUTO = "auto"  # --import: no confirmation
    PROMPT = "prompt"  # ask per VM
    NEVER = "never"  # --no-import


def _normalize_vms(v: Any) -> List[str]:
    if v is None:
        return []
    if isinstance(v, (list, tuple)):
        return [str(x).strip() for x in v if x is not None and str(x).strip()]
    return U.split_csv(str(v))


def _normalize_extension(ext: Optional[str]) -> str:
    ext = (ext or DEFAULT_DISK_EXTENSION).strip()
    return ext if ext.startswith(".") else f".{ext}"


@dataclass(frozen=True)
class MigrationConfig:
    ova_dir: Path = Path(DEFAULT_OVA_DIR)
    scale_dir: Path = Path(DEFAULT_SCALE_DIR)

    api_url: str = DEFAULT_API_URL
    api_user: str = DEFAULT_API_USER
    api_password: str = DEFAULT_API_PASSWORD
    share: str = ""
    verify_tls: bool = False
    api_timeout: float = DEFAULT_API_TIMEOUT_S

    vms: List[str] = field(default_factory=list)
    dry_run: bool = False
    selection_mode: SelectionMode = SelectionMode.INTERACTIVE
    import_mode: ImportMode = ImportMode.PROMPT
    keep_existing_images: bool = False
    disk_extension: str = DEFAULT_DISK_EXTENSION

    def source_dir(self, vm: str) -> Path:
        return self.ova_dir / vm

    def staging_dir(self, vm: str) -> Path:
        return self.scale_dir / vm

    def descriptor_path(self, vm: str) -> Path:
        return self.staging_dir(vm) / f"{vm}.xml"

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "MigrationConfig":
        vms = _normalize_vms(getattr(args, "vms", None))

        if getattr(args, "auto_import", False):
            import_mode = ImportMode.AUTO
        elif getattr(args, "no_import", False):
            import_mode = ImportMode.NEVER
        else:
            import_mode = ImportMode.PROMPT

        timeout = getattr(args, "api_timeout", None)
        return cls(
            ova_dir=Path(getattr(args, "ova_dir", None) or DEFAULT_OVA_DIR).expanduser(),
            scale_dir=Path(getattr(args, "scale_dir", None) or DEFAULT_SCALE_DIR).expanduser(),
            api_url=str(getattr(args, "api_url", None) or DEFAULT_API_URL),
            api_user=str(getattr(args, "api_user", None) or ""),
            api_password=str(getattr(args, "api_password", None) or ""),
            share=str(getattr(args, "share", None) or ""),
            verify_tls=bool(getattr(args, "verify_tls", False)),
            api_timeout=float(timeout) if timeout else DEFAULT_API_TIMEOUT_S,
            vms=vms,
            dry_run=bool(getattr(args, "dry_run", False)),
            selection_mode=SelectionMode.EXPLICIT if vms else SelectionMode.INTERACTIVE,
            import_mode=import_mode,
            keep_existing_images=bool(getattr(args, "keep_existing_images", False)),
            disk_extension=_normalize_extension(getattr(args, "disk_extension", None)),
        )
