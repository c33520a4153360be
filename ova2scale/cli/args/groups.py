# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
from __future__ import annotations

import argparse

from ...config.migration_config import (
    DEFAULT_API_TIMEOUT_S,
    DEFAULT_API_URL,
    DEFAULT_API_USER,
    DEFAULT_DISK_EXTENSION,
    DEFAULT_OVA_DIR,
    DEFAULT_SCALE_DIR,
)


def _add_global_config_logging(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # Global config/logging (two-phase parse relies on these)
    # ------------------------------------------------------------------
    from ... import __version__

    p.add_argument(
        "--config",
        action="append",
        default=[],
        help="YAML/JSON config file (repeatable; later overrides earlier).",
    )
    p.add_argument("--dump-config", action="store_true", help="Print merged config and exit.")
    p.add_argument("--dump-args", action="store_true", help="Print final parsed args and exit.")
    p.add_argument("--version", action="version", version=__version__)
    p.add_argument("-v", "--verbose", action="count", default=0, help="Verbosity: -vv debug, -vvv trace.")
    p.add_argument("-q", "--quiet", action="count", default=0, help="Quieter: -q warnings, -qq errors only.")
    p.add_argument("--log-file", dest="log_file", default=None, help="Write logs to file.")
    p.add_argument("--json-logs", dest="json_logs", action="store_true", help="Emit NDJSON log lines.")


def _add_paths(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # Directory convention
    # ------------------------------------------------------------------
    p.add_argument("--ova-dir", dest="ova_dir", default=DEFAULT_OVA_DIR, help="Root of exported OVF/OVA directories (<ova-dir>/<vm>/*.ovf).")
    p.add_argument("--scale-dir", dest="scale_dir", default=DEFAULT_SCALE_DIR, help="Root of HC3 staging directories (<scale-dir>/<vm>/<vm>.xml).")
    p.add_argument(
        "--disk-extension",
        dest="disk_extension",
        default=DEFAULT_DISK_EXTENSION,
        help="Extension of staged disk images.",
    )


def _add_operation_flags(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # Selection / behaviour
    # ------------------------------------------------------------------
    p.add_argument("--vms", dest="vms", default=None, help="Comma-separated VM names (skip the menu).")
    p.add_argument("-n", "--dry-run", dest="dry_run", action="store_true", help="Print every action, write nothing.")
    p.add_argument("--import", dest="auto_import", action="store_true", help="Import via API without prompting.")
    p.add_argument("--no-import", dest="no_import", action="store_true", help="Never call the import API.")
    p.add_argument(
        "--keep-existing-images",
        dest="keep_existing_images",
        action="store_true",
        help="Do not delete existing images in the staging directory before copying.",
    )


def _add_scale_api(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # Scale HC3 REST API
    # ------------------------------------------------------------------
    p.add_argument("--api", dest="api_url", default=DEFAULT_API_URL, help="Scale REST base URL.")
    p.add_argument("--user", dest="api_user", default=DEFAULT_API_USER, help="API username (empty: no auth).")
    p.add_argument("--pass", dest="api_password", default=None, help="API password (default: admin).")
    p.add_argument("--pass-env", dest="api_password_env", default=None, help="Read the API password from this env var.")
    p.add_argument("--share", dest="share", default=None, help="SMB share prefix HC3 imports from; the VM name is appended.")
    p.add_argument("--verify-tls", dest="verify_tls", action="store_true", help="Verify the HC3 TLS certificate.")
    p.add_argument(
        "--api-timeout",
        dest="api_timeout",
        type=float,
        default=DEFAULT_API_TIMEOUT_S,
        help="Import request timeout in seconds.",
    )
