# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
from __future__ import annotations

import sys
import traceback
from typing import Any, Optional

from .cli.args.parser import parse_args_with_config
from .config.migration_config import MigrationConfig
from .core.exceptions import Fatal, format_exception_for_cli
from .orchestrator.orchestrator import Orchestrator


def _print_stderr(msg: str) -> None:
    print(msg, file=sys.stderr)


def _safe_log(logger: Any, level: str, msg: str) -> None:
    """
    Best-effort logging without assuming logger exists or has a given method.
    """
    if logger is None:
        _print_stderr(msg)
        return

    fn = getattr(logger, level, None)
    if callable(fn):
        fn(msg)
    else:
        _print_stderr(msg)


def main(argv: Optional[list] = None) -> None:
    logger: Optional[Any] = None
    verbose = 0

    # Phase 1: parse (Fatal can happen here, e.g. a missing --config file)
    try:
        args, _conf, logger = parse_args_with_config(argv)
        verbose = int(getattr(args, "verbose", 0) or 0)
        config = MigrationConfig.from_args(args)
    except Fatal as e:
        _safe_log(logger, "error", f"💥 {format_exception_for_cli(e)}")
        raise SystemExit(e.code)
    except KeyboardInterrupt:
        _safe_log(logger, "warning", "Interrupted by user (Ctrl+C).")
        raise SystemExit(130)

    # Phase 2: run pipeline
    try:
        rc = Orchestrator(logger, config, verbose=verbose).run()
    except Fatal as e:
        _safe_log(logger, "error", f"💥 {format_exception_for_cli(e, verbose=verbose)}")
        rc = e.code
    except KeyboardInterrupt:
        _safe_log(logger, "warning", "Interrupted by user (Ctrl+C).")
        rc = 130
    except Exception as e:
        _safe_log(logger, "error", f"💥 UNHANDLED {type(e).__name__}: {e}")
        _safe_log(logger, "debug", traceback.format_exc())
        rc = 1

    raise SystemExit(rc)


if __name__ == "__main__":
    main()
