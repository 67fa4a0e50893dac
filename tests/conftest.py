"""
Pytest configuration for scut tests.

Runs every test from an empty working directory so stray files next to
the checkout cannot leak into a run.
"""

import pytest


@pytest.fixture(autouse=True)
def work_dir(tmp_path, monkeypatch):
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    return work
