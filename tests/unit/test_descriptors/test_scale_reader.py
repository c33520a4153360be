# SPDX-License-Identifier: LGPL-3.0-or-later
from __future__ import annotations

import io
from pathlib import Path

import pytest

from ova2scale.core.exceptions import ParseError
from ova2scale.descriptors.scale_reader import NulStrippingReader, read_scale_disk_ids

SCALE_XML = """<?xml version="1.0" encoding="UTF-8"?>
<domain type="kvm">
  <name>web01</name>
  <devices>
    <disk type="network" device="disk">
      <driver name="qemu" type="qcow2"/>
      <source protocol="scribe" name="scribe/aaaa-1111"/>
      <target dev="vda" bus="virtio"/>
    </disk>
    <disk type="network" device="cdrom">
      <source protocol="scribe" name="scribe/cdrom-iso"/>
    </disk>
    <disk type="file" device="disk">
      <source file="/var/lib/local.img" name="local/ignored"/>
    </disk>
    <disk type="network" device="disk">
      <source protocol="scribe" name="scribe/bbbb-2222"/>
    </disk>
    <interface type="bridge"><source bridge="br0" name="not/a-disk"/></interface>
  </devices>
  <metadata>
    <scale-metadata xmlns="http://scalecomputing.com/scale-metadata">
      <tags><tag name="old"/></tags>
    </scale-metadata>
  </metadata>
</domain>
"""


@pytest.mark.unit
class TestReadScaleDiskIds:
    def test_only_network_disks_in_document_order(self, tmp_path: Path):
        p = tmp_path / "web01.xml"
        p.write_text(SCALE_XML, encoding="utf-8")

        assert read_scale_disk_ids(p) == ["aaaa-1111", "bbbb-2222"]

    def test_nul_padding_is_tolerated(self, tmp_path: Path):
        p = tmp_path / "web01.xml"
        raw = SCALE_XML.encode("utf-8")
        p.write_bytes(raw[:40] + b"\x00\x00" + raw[40:] + b"\x00" * 4096)

        assert read_scale_disk_ids(p) == ["aaaa-1111", "bbbb-2222"]

    def test_name_without_slash(self, tmp_path: Path):
        p = tmp_path / "vm.xml"
        p.write_text('<domain><disk type="network" device="disk"><source name="plain-id"/></disk></domain>')

        assert read_scale_disk_ids(p) == ["plain-id"]

    def test_no_disks(self, tmp_path: Path):
        p = tmp_path / "vm.xml"
        p.write_text("<domain><devices/></domain>")

        assert read_scale_disk_ids(p) == []

    def test_malformed(self, tmp_path: Path):
        p = tmp_path / "vm.xml"
        p.write_text("<domain><devices>")

        with pytest.raises(ParseError) as ei:
            read_scale_disk_ids(p)
        assert ei.value.code == 3

    def test_missing(self, tmp_path: Path):
        with pytest.raises(ParseError):
            read_scale_disk_ids(tmp_path / "absent.xml")


@pytest.mark.unit
class TestNulStrippingReader:
    def test_drops_nuls(self):
        r = NulStrippingReader(io.BytesIO(b"a\x00b\x00\x00c"))
        assert r.read() == b"abc"

    def test_all_nul_chunk_is_not_eof(self):
        r = NulStrippingReader(io.BytesIO(b"\x00" * 8 + b"xyz"))
        assert r.read(4) == b"xyz"
        assert r.read(4) == b""

    def test_readinto(self):
        r = NulStrippingReader(io.BytesIO(b"\x00hi\x00"))
        buf = bytearray(8)
        n = r.readinto(buf)
        assert bytes(buf[:n]) == b"hi"
