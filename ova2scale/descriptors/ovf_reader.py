# SPDX-License-Identifier: LGPL-3.0-or-later
# ova2scale/descriptors/ovf_reader.py
"""
OVF disk-list reader.

Collects every ``<File id=".." href="..">`` in an OVF envelope and orders
them by the numeric suffix of ``id`` (``file0``, ``file1``, ... ``file10``).
Namespace prefixes are ignored on both element and attribute names, so
``ovf:File ovf:href=..`` and plain ``File href=..`` read the same.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import cmp_to_key
from pathlib import Path
from typing import List, Optional

from defusedxml import DefusedXmlException
from defusedxml.ElementTree import ParseError as XMLParseError
from defusedxml.ElementTree import iterparse

from ..core.exceptions import ParseError
from ..core.logger import Log
from .xml_names import attr_local, local_name

_FILE_ID_RE = re.compile(r"file(\d+)")


@dataclass(frozen=True)
class DiskReference:
    id: str
    href: str

    @property
    def ordinal(self) -> Optional[int]:
        m = _FILE_ID_RE.search(self.id)
        return int(m.group(1)) if m else None


def _compare_refs(a: DiskReference, b: DiskReference) -> int:
    na, nb = a.ordinal, b.ordinal
    if na is not None and nb is not None:
        return (na > nb) - (na < nb)
    # Mixed or non-numeric ids: plain string order on id.
    return (a.id > b.id) - (a.id < b.id)


def sort_disk_refs(refs: List[DiskReference]) -> List[DiskReference]:
    return sorted(refs, key=cmp_to_key(_compare_refs))


def read_ovf_disk_refs(path: Path, logger: Optional[logging.Logger] = None) -> List[DiskReference]:
    """
    Parse ``path`` and return its File references in disk order.

    Raises:
        ParseError: file cannot be opened or is not well-formed XML.
    """
    path = Path(path)
    refs: List[DiskReference] = []
    try:
        with open(path, "rb") as f:
            for _event, elem in iterparse(f, events=("start",)):
                if local_name(elem.tag) != "File":
                    continue
                refs.append(
                    DiskReference(
                        id=attr_local(elem, "id") or "",
                        href=attr_local(elem, "href") or "",
                    )
                )
    except OSError as e:
        raise ParseError(3, f"cannot read OVF {path}: {e}", cause=e, context={"path": str(path)})
    except (XMLParseError, DefusedXmlException) as e:
        raise ParseError(3, f"malformed OVF {path}: {e}", cause=e, context={"path": str(path)})

    ordered = sort_disk_refs(refs)
    if logger is not None:
        Log.trace(logger, "OVF %s: %s", path.name, [(r.id, r.href) for r in ordered])
    return ordered


def read_ovf_disk_files(path: Path, logger: Optional[logging.Logger] = None) -> List[str]:
    """Ordered ``href`` list of the OVF's File elements."""
    return [r.href for r in read_ovf_disk_refs(path, logger)]
