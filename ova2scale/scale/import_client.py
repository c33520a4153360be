# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# ova2scale/scale/import_client.py
"""
Scale HC3 REST import trigger.

One POST to ``/rest/v1/VirDomain/import`` pointing HC3 at the SMB share that
holds the staged ``<vm>/<vm>.xml`` and qcow2 files. HC3 answers with a task
tag and the UUID of the VM it is creating; the import itself runs on the
cluster.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
import urllib3
from requests.auth import HTTPBasicAuth

from ..config.migration_config import MigrationConfig
from ..core.exceptions import NetworkError
from ..core.logger import Log

IMPORT_PATH = "/rest/v1/VirDomain/import"
IMPORT_FORMAT = "qcow2"


@dataclass(frozen=True)
class ImportResult:
    task_tag: str
    created_uuid: str


class ScaleImportClient:
    def __init__(
        self,
        logger: logging.Logger,
        config: MigrationConfig,
        *,
        http_client: Any = None,
    ):
        self.logger = logger
        self.config = config
        self._http_client = http_client or requests
        self._session: Optional[Any] = None

        self._disable_tls_warnings()

    def _disable_tls_warnings(self) -> None:
        if self.config.verify_tls:
            return
        urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    @property
    def import_url(self) -> str:
        return self.config.api_url.rstrip("/") + IMPORT_PATH

    @property
    def session(self) -> Any:
        if self._session is None:
            self._session = self._create_session()
        return self._session

    def _create_session(self) -> Any:
        session = self._http_client.Session()
        session.verify = bool(self.config.verify_tls)
        session.headers.update({"Accept": "application/json", "Content-Type": "application/json"})
        if self.config.api_user:
            session.auth = HTTPBasicAuth(self.config.api_user, self.config.api_password)
        return session

    def build_payload(self, vm: str) -> Dict[str, Any]:
        return {
            "source": {
                "pathURI": self.config.share + vm,
                "format": IMPORT_FORMAT,
                "definitionFileName": f"{vm}.xml",
                "allowNonSequentialWrites": True,
                "parallelCountPerTransfer": 0,
            }
        }

    def import_vm(self, vm: str) -> ImportResult:
        """
        Queue an HC3 import of ``vm``.

        Raises:
            NetworkError: no share configured, transport failure, non-200
                status (body included), or an unreadable success body.
        """
        if not self.config.share:
            raise NetworkError(7, "no SMB share configured (--share / share:)", context={"vm": vm})

        Log.step(self.logger, f"⟳ Importing {vm}…")
        Log.trace(self.logger, "POST %s pathURI=%s", self.import_url, self.config.share + vm)

        try:
            resp = self.session.post(
                self.import_url,
                json=self.build_payload(vm),
                timeout=self.config.api_timeout,
            )
        except requests.exceptions.RequestException as e:
            raise NetworkError(7, f"API call failed: {e}", cause=e, context={"vm": vm, "url": self.import_url})

        if resp.status_code != 200:
            raise NetworkError(
                7,
                f"API error {resp.status_code}: {resp.text}",
                context={"vm": vm, "status": resp.status_code},
            )

        try:
            body = resp.json()
            result = ImportResult(
                task_tag=str(body.get("taskTag", "")),
                created_uuid=str(body.get("createdUUID", "")),
            )
        except (ValueError, AttributeError) as e:
            raise NetworkError(7, f"unreadable import response: {e}", cause=e, context={"vm": vm})

        Log.ok(self.logger, f"import queued: task {result.task_tag} (UUID {result.created_uuid})")
        return result
