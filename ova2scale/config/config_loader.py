# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# ova2scale/config/config_loader.py
"""
YAML/JSON config files.

Files are loaded in order and shallow-merged (later wins). The merged dict is
then applied as argparse defaults, so anything given on the command line
still overrides it.
"""
from __future__ import annotations

import argparse
import glob
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Sequence

import yaml

from ..core.exceptions import Fatal

# Friendly config spellings -> argparse dest
_KEY_ALIASES = {
    "api": "api_url",
    "user": "api_user",
    "username": "api_user",
    "pass": "api_password",
    "password": "api_password",
    "password_env": "api_password_env",
    "import": "auto_import",
    "ova_root": "ova_dir",
    "export_root": "ova_dir",
    "scale_root": "scale_dir",
    "staging_root": "scale_dir",
}


class Config:
    @staticmethod
    def normalize_key(key: Any) -> str:
        k = str(key).strip().replace("-", "_")
        return _KEY_ALIASES.get(k, k)

    @staticmethod
    def expand_configs(logger: logging.Logger, paths: Sequence[str]) -> List[Path]:
        """
        Expand ``~`` and shell globs, keeping command-line order.
        A pattern with no match is fatal; a silently ignored config is worse.
        """
        out: List[Path] = []
        for raw in paths:
            pattern = str(Path(raw).expanduser())
            matches = sorted(glob.glob(pattern)) if glob.has_magic(pattern) else [pattern]
            if not matches:
                raise Fatal(2, f"config pattern matched nothing: {raw}")
            for m in matches:
                p = Path(m)
                if not p.is_file():
                    raise Fatal(2, f"config file not found: {p}")
                out.append(p)
        logger.debug("Config files: %s", [str(p) for p in out])
        return out

    @staticmethod
    def load_one(logger: logging.Logger, path: Path) -> Dict[str, Any]:
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise Fatal(2, f"cannot read config {path}: {e}", cause=e)

        try:
            if path.suffix.lower() == ".json":
                data = json.loads(text)
            else:
                data = yaml.safe_load(text)
        except (ValueError, yaml.YAMLError) as e:
            raise Fatal(2, f"invalid config {path}: {e}", cause=e)

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise Fatal(2, f"config {path} must be a mapping at top level, got {type(data).__name__}")

        logger.debug("Loaded config %s (%d keys)", path, len(data))
        return {Config.normalize_key(k): v for k, v in data.items()}

    @staticmethod
    def load_many(logger: logging.Logger, paths: Sequence[Path]) -> Dict[str, Any]:
        merged: Dict[str, Any] = {}
        for p in paths:
            merged.update(Config.load_one(logger, p))
        return merged

    @staticmethod
    def apply_as_defaults(logger: logging.Logger, parser: argparse.ArgumentParser, conf: Dict[str, Any]) -> None:
        dests = {a.dest for a in parser._actions if a.dest and a.dest != argparse.SUPPRESS}
        known: Dict[str, Any] = {}
        for k, v in conf.items():
            if k in dests:
                known[k] = v
            else:
                logger.warning("Ignoring unknown config key: %s", k)
        if known:
            parser.set_defaults(**known)
