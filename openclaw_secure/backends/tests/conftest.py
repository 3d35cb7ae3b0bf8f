"""Shared fixtures for backend tests.

Every backend shells out through ``subprocess.run`` in ``backends.base``;
tests patch that single call and feed it canned CompletedProcess results.
"""

from __future__ import annotations

import subprocess
from unittest.mock import patch

import pytest


@pytest.fixture
def proc():
    """Build a CompletedProcess as a vendor CLI would return it."""

    def _proc(stdout: str = "", returncode: int = 0, stderr: str = "") -> subprocess.CompletedProcess:
        return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)

    return _proc


@pytest.fixture
def mock_run():
    with patch("openclaw_secure.backends.base.subprocess.run") as run:
        yield run


@pytest.fixture
def argvs(mock_run):
    """Return the argv of every subprocess.run call made so far."""

    def _argvs() -> list[list[str]]:
        return [c.args[0] for c in mock_run.call_args_list]

    return _argvs
