# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tests for the error hierarchy, exit codes and secret redaction."""
from __future__ import annotations

import pytest

from ova2scale.core.exceptions import (
    REDACTED,
    CopyError,
    DiscoveryError,
    Fatal,
    NetworkError,
    Ova2ScaleError,
    ParseError,
    PatchError,
    SelectionError,
    StructureError,
    VMError,
    format_exception_for_cli,
)


@pytest.mark.unit
class TestExceptionHierarchy:
    def test_base_exception_creation(self):
        err = Ova2ScaleError(code=1, msg="Test error")

        assert err.code == 1
        assert err.msg == "Test error"
        assert err.cause is None
        assert err.context == {}

    def test_run_level_errors_are_fatal(self):
        assert issubclass(DiscoveryError, Fatal)
        assert issubclass(SelectionError, Fatal)
        assert not issubclass(VMError, Fatal)

    @pytest.mark.parametrize("cls", [ParseError, StructureError, CopyError, PatchError, NetworkError])
    def test_per_vm_errors_are_vm_errors(self, cls):
        err = cls(3, "boom")
        assert isinstance(err, VMError)
        assert not isinstance(err, Fatal)

    def test_positional_code_and_message(self):
        err = Fatal(2, "no candidates")
        assert err.code == 2
        assert str(err) == "no candidates"

    def test_exit_code_is_clamped(self):
        assert Fatal(-5, "x").code == 1
        assert Fatal(999, "x").code == 255
        assert Fatal("nope", "x").code == 1

    def test_message_collapses_to_one_line(self):
        err = CopyError(5, "copy\nfailed\r\n  badly")
        assert err.msg == "copy failed badly"

    def test_with_context_returns_same_instance(self):
        err = StructureError(4, "no anchor")
        same = err.with_context(path="/x/vm.xml")
        assert same is err
        assert err.context == {"path": "/x/vm.xml"}

    def test_with_context_after_context_cleared(self):
        err = ParseError(3, "bad href")
        err.context = None
        err.with_context(vm="web01")
        assert err.context == {"vm": "web01"}


@pytest.mark.security
class TestSecretRedaction:
    def test_password_redacted_in_to_dict(self):
        err = NetworkError(7, "API error", context={"api_password": "hunter2", "vm": "web01"})
        d = err.to_dict()
        assert d["context"]["api_password"] == REDACTED
        assert d["context"]["vm"] == "web01"

    def test_nested_secret_redacted(self):
        err = NetworkError(7, "x", context={"request": {"auth": "Basic abc", "url": "https://h"}})
        d = err.to_dict()
        assert d["context"]["request"]["auth"] == REDACTED
        assert d["context"]["request"]["url"] == "https://h"

    def test_secret_never_in_cli_message(self):
        err = NetworkError(7, "x", context={"password": "hunter2"})
        assert "hunter2" not in format_exception_for_cli(err, verbose=2)


@pytest.mark.unit
class TestFormatForCli:
    def test_verbosity_levels(self):
        cause = OSError("disk full")
        err = PatchError(6, "cannot write vm.xml", cause=cause, context={"path": "/s/vm.xml"})

        assert format_exception_for_cli(err) == "cannot write vm.xml"
        assert "path='/s/vm.xml'" in format_exception_for_cli(err, verbose=1)
        assert "cause: OSError: disk full" in format_exception_for_cli(err, verbose=2)

    def test_foreign_exception(self):
        assert format_exception_for_cli(ValueError("bad")) == "bad"
        assert format_exception_for_cli(ValueError("bad"), verbose=2) == "ValueError: bad"
        assert format_exception_for_cli(ValueError()) == "ValueError"
