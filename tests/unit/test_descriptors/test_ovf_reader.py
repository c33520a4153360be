# SPDX-License-Identifier: LGPL-3.0-or-later
import tempfile
import unittest
from pathlib import Path
from unittest.mock import Mock

from ova2scale.core.exceptions import ParseError
from ova2scale.descriptors.ovf_reader import (
    DiskReference,
    read_ovf_disk_files,
    read_ovf_disk_refs,
    sort_disk_refs,
)

OVF_NS = """<?xml version="1.0" encoding="UTF-8"?>
<Envelope xmlns="http://schemas.dmtf.org/ovf/envelope/1"
          xmlns:ovf="http://schemas.dmtf.org/ovf/envelope/1">
  <References>
    {files}
  </References>
  <DiskSection><Info>Virtual disks</Info></DiskSection>
</Envelope>
"""


def _file(fid, href):
    return f'<File ovf:id="{fid}" ovf:href="{href}" ovf:size="1024"/>'


class TestReadOvfDiskRefs(unittest.TestCase):
    def setUp(self):
        self.logger = Mock()
        self._td = tempfile.TemporaryDirectory()
        self.td = Path(self._td.name)

    def tearDown(self):
        self._td.cleanup()

    def _write(self, text, name="vm.ovf"):
        p = self.td / name
        p.write_text(text, encoding="utf-8")
        return p

    def test_numeric_order_beyond_ten(self):
        files = "\n    ".join(_file(f"file{i}", f"disk{i}.vmdk") for i in (10, 2, 0, 1))
        p = self._write(OVF_NS.format(files=files))

        self.assertEqual(
            read_ovf_disk_files(p, self.logger),
            ["disk0.vmdk", "disk1.vmdk", "disk2.vmdk", "disk10.vmdk"],
        )

    def test_unprefixed_attributes(self):
        p = self._write(
            '<Envelope><References>'
            '<File id="file1" href="b.vmdk"/><File id="file0" href="a.vmdk"/>'
            '</References></Envelope>'
        )
        refs = read_ovf_disk_refs(p)
        self.assertEqual(refs, [DiskReference("file0", "a.vmdk"), DiskReference("file1", "b.vmdk")])

    def test_non_file_elements_ignored(self):
        p = self._write(
            '<Envelope><References><File id="file0" href="a.vmdk"/></References>'
            '<DiskSection><Disk diskId="vmdisk1" fileRef="file0"/></DiskSection></Envelope>'
        )
        self.assertEqual(read_ovf_disk_files(p), ["a.vmdk"])

    def test_no_files(self):
        p = self._write("<Envelope><References/></Envelope>")
        self.assertEqual(read_ovf_disk_files(p), [])

    def test_malformed_raises_parse_error(self):
        p = self._write("<Envelope><References><File id='file0'")
        with self.assertRaises(ParseError) as cm:
            read_ovf_disk_files(p)
        self.assertEqual(cm.exception.code, 3)
        self.assertEqual(cm.exception.context["path"], str(p))

    def test_missing_file_raises_parse_error(self):
        with self.assertRaises(ParseError):
            read_ovf_disk_files(self.td / "absent.ovf")


class TestSortDiskRefs(unittest.TestCase):
    def test_mixed_ids_fall_back_to_string_order(self):
        refs = [
            DiskReference("file1", "b"),
            DiskReference("disk-a", "x"),
            DiskReference("file0", "a"),
        ]
        ordered = [r.id for r in sort_disk_refs(refs)]
        # numeric pair keeps numeric order; the odd one sorts by id text
        self.assertEqual(ordered, ["disk-a", "file0", "file1"])

    def test_ordinal(self):
        self.assertEqual(DiskReference("file12", "x").ordinal, 12)
        self.assertIsNone(DiskReference("disk", "x").ordinal)
