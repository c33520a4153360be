# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# ova2scale/orchestrator/metadata_patcher.py
"""
Provenance tagging of the Scale descriptor.

Two text transforms, always in this order:

  1. strip  - drop every existing ``<tags ...>...</tags>`` block
  2. insert - put the fixed ``imported_by_script`` block on the lines just
     before ``</scale-metadata>``

Working on text (not a parsed tree) keeps every unrelated byte as it was,
including the NUL padding HC3 sometimes writes. Running the patch twice gives
the same bytes as running it once.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path

from ..config.migration_config import MigrationConfig
from ..core.exceptions import PatchError, StructureError
from ..core.file_ops import atomic_write
from ..core.logger import Log

SCALE_METADATA_CLOSE = "</scale-metadata>"

PROVENANCE_BLOCK = (
    "      <tags>\n"
    '        <tag name="imported_by_script"/>\n'
    "      </tags>\n"
)

# A block that owns its line(s) goes together with its indentation and
# newline; an inline block goes alone. The body may not run past a </tags>.
_TAGS_OPEN = r"<tags(?:\s[^>]*)?"
_TAGS_BODY = rf"(?:{_TAGS_OPEN}/>|{_TAGS_OPEN}>(?:(?!</tags>).)*</tags>)"
_TAGS_RE = re.compile(
    rf"^[ \t]*{_TAGS_BODY}[ \t]*(?:\r?\n|\Z)|{_TAGS_BODY}",
    re.DOTALL | re.MULTILINE,
)

# Anchor with its indentation when it starts its own line.
_ANCHOR_RE = re.compile(rf"(^[ \t]*)?{re.escape(SCALE_METADATA_CLOSE)}", re.MULTILINE)

# Descriptor bytes are not guaranteed UTF-8; surrogateescape round-trips them.
_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


def strip_tags(text: str) -> str:
    return _TAGS_RE.sub("", text)


def _newline_of(text: str) -> str:
    return "\r\n" if "\r\n" in text else "\n"


def insert_tags(text: str) -> str:
    if SCALE_METADATA_CLOSE not in text:
        raise StructureError(4, f"no {SCALE_METADATA_CLOSE} found")
    nl = _newline_of(text)
    block = PROVENANCE_BLOCK.replace("\n", nl)

    def _insert_before_anchor(m: "re.Match[str]") -> str:
        indent = m.group(1)
        if indent is None:
            # Anchor shares a line with other content: give the block its own lines.
            return nl + block + SCALE_METADATA_CLOSE
        return block + indent + SCALE_METADATA_CLOSE

    return _ANCHOR_RE.sub(_insert_before_anchor, text)


def rewrite_tags(text: str) -> str:
    return insert_tags(strip_tags(text))


class MetadataPatcher:
    def __init__(self, logger: logging.Logger, config: MigrationConfig):
        self.logger = logger
        self.config = config

    def patch(self, path: Path) -> str:
        """
        Rewrite the tags block of ``path`` and return the new text.

        Raises:
            StructureError: anchor missing; ``path`` is not touched.
            PatchError: ``path`` could not be read or the new content could
                not be persisted; ``path`` keeps its previous content.
        """
        path = Path(path)
        try:
            original = path.read_bytes().decode(_ENCODING, _ERRORS)
        except OSError as e:
            raise PatchError(6, f"cannot read {path}: {e}", cause=e, context={"path": str(path)})

        try:
            patched = rewrite_tags(original)
        except StructureError as e:
            raise e.with_context(path=str(path))

        if patched == original:
            Log.trace(self.logger, "%s already carries the provenance tag", path.name)

        if self.config.dry_run:
            self.logger.info("[dry-run] would update tags in %s", path.name)
            return patched

        try:
            with atomic_write(path) as tmp:
                tmp.write_bytes(patched.encode(_ENCODING, _ERRORS))
        except OSError as e:
            raise PatchError(6, f"cannot write {path}: {e}", cause=e, context={"path": str(path)})

        self.logger.info("🏷  tagged %s", path.name)
        return patched
