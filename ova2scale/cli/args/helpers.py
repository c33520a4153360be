# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# ova2scale/cli/args/helpers.py
from __future__ import annotations

import argparse
import os
from typing import Any, Dict, Optional


def _require(v: Any) -> bool:
    """True if v is meaningfully present (treats empty/whitespace-only strings as missing)."""
    if v is None:
        return False
    if isinstance(v, str):
        return v.strip() != ""
    return True


def _merged_get(args: argparse.Namespace, conf: Dict[str, Any], key: str) -> Any:
    """
    Prefer CLI override if present (non-empty), else config.
    """
    v = getattr(args, key, None)
    if _require(v):
        return v
    return conf.get(key)


def _merged_secret(args: argparse.Namespace, conf: Dict[str, Any], value_key: str, env_key: str) -> Optional[str]:
    """
    Resolve a secret from (CLI value) or (CLI env var name) or (YAML value) or (YAML env var name).
    Example: (api_password, api_password_env)
    """
    direct = getattr(args, value_key, None)
    if _require(direct):
        return str(direct)

    envname = getattr(args, env_key, None)
    if _require(envname):
        return os.environ.get(str(envname))

    direct = conf.get(value_key)
    if _require(direct):
        return str(direct)

    envname = conf.get(env_key)
    if _require(envname):
        return os.environ.get(str(envname))

    return None
