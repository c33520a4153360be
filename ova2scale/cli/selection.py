# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# ova2scale/cli/selection.py
"""
Interactive prompts: which VMs to migrate, and whether to import each one.
"""
from __future__ import annotations

from typing import Callable, List, Sequence

from ..core.exceptions import SelectionError
from ..core.logger import c

InputFn = Callable[[str], str]


def _read_line(input_fn: InputFn, prompt: str) -> str:
    try:
        return input_fn(prompt)
    except EOFError:
        return ""


def parse_selection(line: str, options: Sequence[str]) -> List[str]:
    """
    Resolve a menu answer against ``options``.

    ``all`` (any case) picks everything; otherwise the answer is a
    comma-separated list of 1-based indices. Blank means nothing selected.
    Duplicates collapse to their first position.

    Raises:
        SelectionError: a token is not an integer in ``1..len(options)``.
    """
    line = (line or "").strip()
    if not line:
        return []
    if line.lower() == "all":
        return list(options)

    picked: List[str] = []
    for tok in line.split(","):
        tok = tok.strip()
        try:
            i = int(tok)
        except ValueError:
            raise SelectionError(2, f"invalid selection {tok!r}", context={"answer": line})
        if i < 1 or i > len(options):
            raise SelectionError(
                2,
                f"invalid selection {tok!r} (expected 1..{len(options)})",
                context={"answer": line},
            )
        name = options[i - 1]
        if name not in picked:
            picked.append(name)
    return picked


def render_menu(options: Sequence[str]) -> str:
    lines = [c("Select VM(s) to update:", "cyan", ["bold"])]
    for i, vm in enumerate(options, start=1):
        lines.append(f"  {i:2d}) {vm}")
    return "\n".join(lines)


def prompt_selection(options: Sequence[str], *, input_fn: InputFn = input) -> List[str]:
    print(render_menu(options))
    answer = _read_line(input_fn, "Enter number(s) separated by comma (or 'all'): ")
    return parse_selection(answer, options)


def confirm_import(vm: str, *, input_fn: InputFn = input) -> bool:
    answer = _read_line(input_fn, f"Import {vm} via API? (y/N): ")
    return answer.strip().lower().startswith("y")
