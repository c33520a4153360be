# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# ova2scale/config/__init__.py
from .config_loader import Config
from .migration_config import ImportMode, MigrationConfig, SelectionMode

__all__ = ["Config", "ImportMode", "MigrationConfig", "SelectionMode"]
