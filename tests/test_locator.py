"""Tests for the source file locator."""

from pathlib import Path

import pytest

from perfxray.source.locator import FileLocator, locate_file


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    _write(tmp_path / "node_modules" / "lib" / "user.ts", "export class UserService {}\n")
    _write(tmp_path / ".cache" / "user.ts", "export class UserService {}\n")
    _write(tmp_path / "dist" / "user.ts", "export class UserService {}\n")
    _write(tmp_path / "src" / "legacy.js", "class UserService {}\n")
    _write(tmp_path / "src" / "admin.ts", "export class UserServiceAdmin {}\n")
    _write(
        tmp_path / "src" / "app" / "user.service.ts",
        "import { Injectable } from '@angular/core';\n\n"
        "@Injectable()\nexport class UserService implements OnInit {\n}\n",
    )
    _write(tmp_path / "src" / "app" / "list.component.tsx", "export default class ListView {}\n")
    _write(tmp_path / "src" / "base.ts", "export abstract class BaseStore<T> {}\n")
    _write(tmp_path / "src" / "consts.ts", "const Helper = () => {};\n")
    return tmp_path


class TestFileLocator:
    """Tests for class lookup."""

    def test_finds_exported_class(self, workspace: Path) -> None:
        path = FileLocator(workspace).find_class("UserService")
        assert path == workspace / "src" / "app" / "user.service.ts"

    def test_default_export_in_tsx(self, workspace: Path) -> None:
        path = FileLocator(workspace).find_class("ListView")
        assert path is not None and path.name == "list.component.tsx"

    def test_abstract_class(self, workspace: Path) -> None:
        assert FileLocator(workspace).find_class("BaseStore") == workspace / "src" / "base.ts"

    def test_name_prefix_does_not_match(self, workspace: Path) -> None:
        assert FileLocator(workspace).find_class("UserServiceAdm") is None

    def test_non_class_declaration_is_ignored(self, workspace: Path) -> None:
        assert FileLocator(workspace).find_class("Helper") is None

    def test_skips_ignored_and_hidden_dirs(self, workspace: Path) -> None:
        scanned = list(FileLocator(workspace).iter_source_files())
        parts = {part for p in scanned for part in p.relative_to(workspace).parts}
        assert "node_modules" not in parts
        assert "dist" not in parts
        assert ".cache" not in parts
        assert all(p.suffix in {".ts", ".tsx"} for p in scanned)

    def test_custom_extensions(self, workspace: Path) -> None:
        locator = FileLocator(workspace, extensions=["js"])
        assert locator.find_class("UserService") == workspace / "src" / "legacy.js"


class TestLocateFile:
    """Tests for the FileLocation wrapper."""

    def test_found(self, workspace: Path) -> None:
        location = locate_file("UserService", workspace)
        assert location.found
        assert location.file_path.endswith("user.service.ts")

    def test_not_found(self, workspace: Path) -> None:
        location = locate_file("Missing", workspace)
        assert location.to_dict() == {"filePath": "", "found": False}
