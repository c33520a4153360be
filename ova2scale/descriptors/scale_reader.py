# SPDX-License-Identifier: LGPL-3.0-or-later
# ova2scale/descriptors/scale_reader.py
"""
Scale HC3 descriptor disk-ID reader.

HC3 exports (``<vm>/<vm>.xml``) embed a libvirt-style domain. Every
``<disk type="network" device="disk">`` carries a ``<source name="..../<uuid>">``
whose trailing segment is the name the staged qcow2 must carry.

HC3 descriptors are observed with stray NUL padding, which expat rejects,
so the byte stream is filtered before it reaches the tokenizer.
"""
from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import BinaryIO, List, Optional

from defusedxml import DefusedXmlException
from defusedxml.ElementTree import ParseError as XMLParseError
from defusedxml.ElementTree import iterparse

from ..core.exceptions import ParseError
from ..core.logger import Log
from .xml_names import attr_local, local_name

DISK_TYPE = "network"
DISK_DEVICE = "disk"


class NulStrippingReader(io.RawIOBase):
    """Read-only byte stream that drops every 0x00 from the wrapped stream."""

    def __init__(self, raw: BinaryIO):
        super().__init__()
        self._raw = raw

    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        while True:
            chunk = self._raw.read(size)
            if not chunk:
                return b""
            cleaned = chunk.replace(b"\x00", b"")
            # An all-NUL chunk is not EOF; keep reading.
            if cleaned or size is None or size < 0:
                return cleaned

    def readinto(self, b) -> int:
        data = self.read(len(b))
        n = len(data)
        b[:n] = data
        return n


def read_scale_disk_ids(path: Path, logger: Optional[logging.Logger] = None) -> List[str]:
    """
    Return the disk identifiers of ``path`` in document order.

    Only ``<source name>`` values nested in a network/disk ``<disk>`` count.

    Raises:
        ParseError: file cannot be opened or is not well-formed XML.
    """
    path = Path(path)
    ids: List[str] = []
    in_disk = False
    try:
        with open(path, "rb") as f:
            for event, elem in iterparse(NulStrippingReader(f), events=("start", "end")):
                tag = local_name(elem.tag)
                if event == "end":
                    if tag == "disk":
                        in_disk = False
                    continue

                if tag == "disk":
                    in_disk = (
                        attr_local(elem, "type") == DISK_TYPE
                        and attr_local(elem, "device") == DISK_DEVICE
                    )
                elif in_disk and tag == "source":
                    name = attr_local(elem, "name")
                    if name is not None:
                        ids.append(name.split("/")[-1])
    except OSError as e:
        raise ParseError(3, f"cannot read Scale descriptor {path}: {e}", cause=e, context={"path": str(path)})
    except (XMLParseError, DefusedXmlException) as e:
        raise ParseError(3, f"malformed Scale descriptor {path}: {e}", cause=e, context={"path": str(path)})

    if logger is not None:
        Log.trace(logger, "Scale %s: disk ids %s", path.name, ids)
    return ids
