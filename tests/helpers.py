"""Test helpers: a recording host and builders for manifests and packages."""

from pathlib import Path

from relocator.workflow.host import Host


class RecordingHost(Host):
    """Host that records external calls instead of performing them."""

    def __init__(self):
        super().__init__()
        self.calls: list[str] = []

    def resolve_dependencies(self) -> None:
        self.calls.append("resolve")

    def request_reload(self) -> None:
        self.calls.append("reload")

    def import_path(self, relative_path: str) -> None:
        self.calls.append(f"import {relative_path}")


def write_manifest(project_root: Path, package_path: str, newline: str = "\n") -> bytes:
    lines = [
        "{",
        '  "dependencies": {',
        '    "com.unity.test-framework": "1.1.33",',
        f'    "de.codesmile.foo": "file:{package_path}",',
        '    "com.unity.ugui": "1.0.0"',
        "  }",
        "}",
    ]
    data = (newline.join(lines) + newline).encode("utf-8")
    manifest = project_root / "Packages" / "manifest.json"
    manifest.parent.mkdir(parents=True, exist_ok=True)
    manifest.write_bytes(data)
    return data


def make_package(root: Path, name: str = "de.codesmile.foo") -> Path:
    package = root / name
    (package / "Editor").mkdir(parents=True)
    (package / "Editor" / "FooEditor.cs").write_text("// editor")
    (package / "Editor.meta").write_text("guid: editor")
    (package / "package.json").write_text('{"name": "de.codesmile.foo"}')
    (package / "package.json.meta").write_text("guid: package")
    (package / "Tests").mkdir()
    (package / "Tests" / "FooTests.cs").write_text("// not on the allowlist")
    return package
