# SPDX-License-Identifier: LGPL-3.0-or-later
"""Builds <ova_dir>/<vm>/ and <scale_dir>/<vm>/ trees for pipeline tests."""
from __future__ import annotations

from pathlib import Path
from typing import Sequence

SCALE_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<domain type="kvm">
  <name>{vm}</name>
  <devices>
{disks}
  </devices>
  <metadata>
    <scale-metadata xmlns="http://scalecomputing.com/scale-metadata">
      <description>{vm}</description>
    </scale-metadata>
  </metadata>
</domain>
"""

DISK_TEMPLATE = """    <disk type="network" device="disk">
      <source protocol="scribe" name="scribe/{id}"/>
    </disk>"""


def write_ovf(vm_dir: Path, hrefs: Sequence[str], *, name: str = "") -> Path:
    vm_dir.mkdir(parents=True, exist_ok=True)
    files = "".join(
        f'<File ovf:id="file{i}" ovf:href="{h}"/>' for i, h in enumerate(hrefs)
    )
    ovf = vm_dir / (name or f"{vm_dir.name}.ovf")
    ovf.write_text(
        '<Envelope xmlns:ovf="http://schemas.dmtf.org/ovf/envelope/1">'
        f"<References>{files}</References></Envelope>",
        encoding="utf-8",
    )
    return ovf


def write_scale_xml(vm_dir: Path, vm: str, ids: Sequence[str]) -> Path:
    vm_dir.mkdir(parents=True, exist_ok=True)
    p = vm_dir / f"{vm}.xml"
    disks = "\n".join(DISK_TEMPLATE.format(id=i) for i in ids)
    p.write_text(SCALE_TEMPLATE.format(vm=vm, disks=disks), encoding="utf-8")
    return p


def make_vm(
    ova_dir: Path,
    scale_dir: Path,
    vm: str,
    *,
    disks: Sequence[str] = ("disk1.vmdk",),
    ids: Sequence[str] = ("uuid-1",),
    payload: bytes = b"DISKDATA",
) -> Path:
    """Create a complete candidate; returns the Scale descriptor path."""
    src = ova_dir / vm
    write_ovf(src, disks)
    for i, d in enumerate(disks):
        (src / d).write_bytes(payload + bytes([i]))
    return write_scale_xml(scale_dir / vm, vm, ids)
