# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# ova2scale/__init__.py
"""
ova2scale - stage OVF/OVA exports into Scale Computing HC3 placeholder VMs

Usage as a library:

    from ova2scale import MigrationConfig, Orchestrator
    from ova2scale.core.logger import Log

    logger = Log.setup(verbose=1)
    config = MigrationConfig(vms=["web01"], dry_run=True)
    rc = Orchestrator(logger, config).run()
"""

__version__ = "0.1.0"

from .config.migration_config import ImportMode, MigrationConfig, SelectionMode
from .orchestrator.orchestrator import Orchestrator, VMResult

__all__ = [
    "__version__",
    "ImportMode",
    "MigrationConfig",
    "Orchestrator",
    "SelectionMode",
    "VMResult",
]
