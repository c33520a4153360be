# SPDX-License-Identifier: LGPL-3.0-or-later
import tempfile
import unittest
from pathlib import Path
from unittest.mock import Mock, patch

from ova2scale.config.migration_config import MigrationConfig
from ova2scale.core.exceptions import CopyError
from ova2scale.orchestrator.materializer import DiskMaterializer
from ova2scale.orchestrator.pairing import build_copy_plan


class TestDiskMaterializer(unittest.TestCase):
    def setUp(self):
        self.logger = Mock()
        self._td = tempfile.TemporaryDirectory()
        self.root = Path(self._td.name)
        self.src = self.root / "ova" / "web01"
        self.dst = self.root / "scale" / "web01"
        self.src.mkdir(parents=True)
        self.dst.mkdir(parents=True)
        (self.src / "a.vmdk").write_bytes(b"A" * 1000)
        (self.src / "b.vmdk").write_bytes(b"B" * 2000)

    def tearDown(self):
        self._td.cleanup()

    def _plan(self, hrefs=("a.vmdk", "b.vmdk"), ids=("u1", "u2")):
        return build_copy_plan("web01", list(hrefs), list(ids), self.src, self.dst)

    def test_copies_every_pair(self):
        m = DiskMaterializer(self.logger, MigrationConfig())

        with patch("ova2scale.orchestrator.materializer.is_tty", return_value=False):
            done = m.materialize(self._plan())

        self.assertEqual(done, 2)
        self.assertEqual((self.dst / "u1.qcow2").read_bytes(), b"A" * 1000)
        self.assertEqual((self.dst / "u2.qcow2").read_bytes(), b"B" * 2000)

    def test_dry_run_touches_nothing(self):
        m = DiskMaterializer(self.logger, MigrationConfig(dry_run=True))
        stale = self.dst / "old.qcow2"
        stale.write_bytes(b"old")

        removed = m.purge_stale_images(self.dst)
        done = m.materialize(self._plan())

        self.assertEqual(removed, [stale])
        self.assertEqual(done, 2)
        self.assertEqual(sorted(p.name for p in self.dst.iterdir()), ["old.qcow2"])
        logged = " ".join(str(c) for c in self.logger.info.call_args_list)
        self.assertIn("[dry-run] copy", logged)
        self.assertIn("[dry-run] delete", logged)

    def test_missing_source_fails_before_destination_exists(self):
        m = DiskMaterializer(self.logger, MigrationConfig())
        plan = self._plan(hrefs=("a.vmdk", "missing.vmdk"))

        with patch("ova2scale.orchestrator.materializer.is_tty", return_value=False):
            with self.assertRaises(CopyError) as cm:
                m.materialize(plan)

        self.assertEqual(cm.exception.code, 5)
        self.assertTrue((self.dst / "u1.qcow2").exists())
        self.assertFalse((self.dst / "u2.qcow2").exists())

    def test_mid_copy_failure_leaves_no_partial_file(self):
        m = DiskMaterializer(self.logger, MigrationConfig())
        real_open = open

        class FailingWriter:
            def __init__(self, fh):
                self.fh = fh

            def __enter__(self):
                return self

            def __exit__(self, *exc):
                self.fh.close()
                return False

            def write(self, buf):
                self.fh.write(buf[:10])
                raise OSError(28, "No space left on device")

        def fake_open(path, mode="r", *a, **k):
            fh = real_open(path, mode, *a, **k)
            if "w" in mode:
                return FailingWriter(fh)
            return fh

        with patch("ova2scale.orchestrator.materializer.is_tty", return_value=False), \
                patch("ova2scale.core.file_ops.open", fake_open, create=True):
            with self.assertRaises(CopyError):
                m.materialize(self._plan(hrefs=("a.vmdk",), ids=("u1",)))

        self.assertFalse((self.dst / "u1.qcow2").exists())

    def test_purge_only_matches_extension(self):
        m = DiskMaterializer(self.logger, MigrationConfig())
        (self.dst / "x.qcow2").write_bytes(b"x")
        (self.dst / "web01.xml").write_text("<domain/>")

        removed = m.purge_stale_images(self.dst)

        self.assertEqual([p.name for p in removed], ["x.qcow2"])
        self.assertEqual(sorted(p.name for p in self.dst.iterdir()), ["web01.xml"])
