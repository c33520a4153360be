# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
from __future__ import annotations

import argparse
from typing import Any, Dict, Optional

from ...config.migration_config import DEFAULT_API_PASSWORD
from .helpers import _merged_get, _merged_secret, _require


def _validate_import_flags(args: argparse.Namespace) -> None:
    if getattr(args, "auto_import", False) and getattr(args, "no_import", False):
        raise SystemExit("--import and --no-import are mutually exclusive")


def _validate_api_timeout(args: argparse.Namespace) -> None:
    t = getattr(args, "api_timeout", None)
    if t is None:
        return
    try:
        v = float(t)
    except (TypeError, ValueError):
        raise SystemExit(f"api_timeout must be a number, got: {t!r}")
    if v <= 0:
        raise SystemExit(f"api_timeout must be > 0, got: {v}")
    args.api_timeout = v


def _resolve_api_password(
    args: argparse.Namespace,
    conf: Dict[str, Any],
    cli: Optional[argparse.Namespace] = None,
) -> None:
    """
    Resolve the HC3 password into args.api_password.

    ``cli`` holds what was given on the command line alone (``args`` also
    carries config values applied as parser defaults); any CLI source beats
    any config source. An explicit env var name that is unset is an error;
    with nothing configured at all the appliance default applies.
    """
    pw = _merged_secret(cli if cli is not None else args, conf, "api_password", "api_password_env")
    if pw is None:
        envname = _merged_get(args, conf, "api_password_env")
        if _require(envname):
            raise SystemExit(f"api_password_env={envname} is set but the environment variable is empty")
        pw = DEFAULT_API_PASSWORD
    args.api_password = pw


def validate_args(
    args: argparse.Namespace,
    conf: Dict[str, Any],
    cli: Optional[argparse.Namespace] = None,
) -> None:
    _validate_import_flags(args)
    _validate_api_timeout(args)
    _resolve_api_password(args, conf, cli)

    if not _require(getattr(args, "disk_extension", None)):
        raise SystemExit("disk_extension must not be empty")
