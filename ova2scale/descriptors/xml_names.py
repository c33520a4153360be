# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
"""Namespace-agnostic name helpers for ElementTree elements."""
from __future__ import annotations

from typing import Any, Optional


def local_name(tag: Any) -> str:
    """
    Strip a Clark-notation namespace from a tag or attribute key.

    Example:
        >>> local_name("{http://schemas.dmtf.org/ovf/envelope/1}File")
        'File'
        >>> local_name("disk")
        'disk'
    """
    if not isinstance(tag, str):
        return ""
    if tag.startswith("{") and "}" in tag:
        return tag.split("}", 1)[1]
    return tag


def attr_local(elem: Any, name: str) -> Optional[str]:
    """First attribute of ``elem`` whose local name is ``name``."""
    for key, value in elem.attrib.items():
        if local_name(key) == name:
            return value
    return None


__all__ = ["local_name", "attr_local"]
