# SPDX-License-Identifier: LGPL-3.0-or-later
# ova2scale/scale/__init__.py
from .import_client import ImportResult, ScaleImportClient

__all__ = ["ImportResult", "ScaleImportClient"]
