"""Tests for the package copier."""

import tempfile
from pathlib import Path

import pytest

from relocator.copier.package_copier import PackageCopier
from relocator.errors import FilesystemConflict, PreconditionViolation

from helpers import make_package


def test_copy_allowlisted_entries_with_meta():
    with tempfile.TemporaryDirectory() as tmpdir:
        source = make_package(Path(tmpdir) / "pkgs")
        dest = Path(tmpdir) / "Packages" / "foo"

        copied = PackageCopier().copy_into(source, dest)

        assert copied == ["package.json", "Editor"]
        assert (dest / "package.json").read_text() == '{"name": "de.codesmile.foo"}'
        assert (dest / "package.json.meta").read_text() == "guid: package"
        assert (dest / "Editor" / "FooEditor.cs").exists()
        assert (dest / "Editor.meta").exists()


def test_copy_skips_missing_and_unlisted_entries():
    with tempfile.TemporaryDirectory() as tmpdir:
        source = make_package(Path(tmpdir) / "pkgs")
        dest = Path(tmpdir) / "foo"

        PackageCopier().copy_into(source, dest)

        assert not (dest / "CHANGELOG.md").exists()
        assert not (dest / "Runtime").exists()
        assert not (dest / "Tests").exists()


def test_copy_without_meta_sidecar():
    with tempfile.TemporaryDirectory() as tmpdir:
        source = Path(tmpdir) / "pkg"
        source.mkdir()
        (source / "README.md").write_text("# readme")
        dest = Path(tmpdir) / "out"

        PackageCopier().copy_into(source, dest)

        assert (dest / "README.md").exists()
        assert not (dest / "README.md.meta").exists()


def test_copy_custom_allowlist():
    with tempfile.TemporaryDirectory() as tmpdir:
        source = make_package(Path(tmpdir) / "pkgs")
        dest = Path(tmpdir) / "out"

        copied = PackageCopier(allowlist=["Tests"]).copy_into(source, dest)

        assert copied == ["Tests"]
        assert (dest / "Tests" / "FooTests.cs").exists()
        assert not (dest / "package.json").exists()


def test_copy_into_existing_destination_fails():
    with tempfile.TemporaryDirectory() as tmpdir:
        source = make_package(Path(tmpdir) / "pkgs")
        dest = Path(tmpdir) / "foo"
        dest.mkdir()

        with pytest.raises(FilesystemConflict):
            PackageCopier().copy_into(source, dest)
        assert list(dest.iterdir()) == []


def test_copy_missing_source_fails():
    with tempfile.TemporaryDirectory() as tmpdir:
        dest = Path(tmpdir) / "foo"
        with pytest.raises(PreconditionViolation):
            PackageCopier().copy_into(Path(tmpdir) / "nope", dest)
        assert not dest.exists()


def test_delete_tree_recreates_empty_root_and_removes_meta():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir) / "Packages"
        PackageCopier().copy_into(make_package(Path(tmpdir) / "pkgs"), root / "foo")
        (Path(tmpdir) / "Packages.meta").write_text("guid: root")

        PackageCopier().delete_tree(root)

        assert root.is_dir()
        assert list(root.iterdir()) == []
        assert not (Path(tmpdir) / "Packages.meta").exists()


def test_delete_tree_missing_root():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir) / "Assets" / "Packages"
        PackageCopier().delete_tree(root)
        assert root.is_dir()
