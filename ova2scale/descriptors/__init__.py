# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# ova2scale/descriptors/__init__.py
"""Readers for the two descriptor dialects: OVF (source) and Scale HC3 XML (destination)."""

from .ovf_reader import DiskReference, read_ovf_disk_files, read_ovf_disk_refs
from .scale_reader import NulStrippingReader, read_scale_disk_ids

__all__ = [
    "DiskReference",
    "read_ovf_disk_files",
    "read_ovf_disk_refs",
    "NulStrippingReader",
    "read_scale_disk_ids",
]
