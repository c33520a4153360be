# SPDX-License-Identifier: LGPL-3.0-or-later
# ova2scale/core/__init__.py
from .exceptions import (
    CopyError,
    DiscoveryError,
    Fatal,
    NetworkError,
    Ova2ScaleError,
    ParseError,
    PatchError,
    SelectionError,
    StructureError,
    VMError,
)

__all__ = [
    "Ova2ScaleError",
    "Fatal",
    "DiscoveryError",
    "SelectionError",
    "VMError",
    "ParseError",
    "StructureError",
    "CopyError",
    "PatchError",
    "NetworkError",
]
