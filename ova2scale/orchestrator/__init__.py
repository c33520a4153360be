# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# ova2scale/orchestrator/__init__.py
"""
Per-VM migration pipeline: discovery, pairing, disk materialization,
descriptor tagging, and the driver that runs them.
"""

from .discovery import VMDiscovery
from .materializer import DiskMaterializer
from .metadata_patcher import MetadataPatcher
from .orchestrator import Orchestrator, VMResult
from .pairing import CopyPair, CopyPlan, build_copy_plan

__all__ = [
    "Orchestrator",
    "VMResult",
    "VMDiscovery",
    "DiskMaterializer",
    "MetadataPatcher",
    "CopyPair",
    "CopyPlan",
    "build_copy_plan",
]
