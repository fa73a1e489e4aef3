"""Shared fixtures: a throwaway project with one linked package and a recording host."""

import pytest

from relocator.config import RelocationConfig
from relocator.workflow.gate import current_identity

from helpers import RecordingHost, make_package, write_manifest


@pytest.fixture
def host():
    return RecordingHost()


@pytest.fixture
def package_dir(tmp_path):
    return make_package(tmp_path / "pkgs")


@pytest.fixture
def config(tmp_path, package_dir):
    project = tmp_path / "project"
    project.mkdir()
    write_manifest(project, package_dir.as_posix())
    return RelocationConfig(
        project_root=project.resolve(),
        state_dir=tmp_path / "state",
        operator=current_identity(),
    )
