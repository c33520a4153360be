# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# ova2scale/core/utils.py
from __future__ import annotations

import json
from typing import Any, List, Optional


class U:
    @staticmethod
    def json_dump(obj: Any) -> str:
        return json.dumps(obj, indent=2, sort_keys=True, default=str)

    @staticmethod
    def human_bytes(n: Optional[int]) -> str:
        if n is None:
            return "unknown"
        x = float(n)
        for unit in ["B", "KiB", "MiB", "GiB", "TiB", "PiB"]:
            if x < 1024 or unit == "PiB":
                return f"{x:.2f} {unit}" if unit != "B" else f"{int(x)} {unit}"
            x /= 1024
        return f"{n} B"

    @staticmethod
    def split_csv(s: Optional[str]) -> List[str]:
        """'a, b,,c ' -> ['a', 'b', 'c']"""
        if not s:
            return []
        return [tok.strip() for tok in str(s).split(",") if tok.strip()]
