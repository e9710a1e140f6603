from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from unbindvs.errors import ArgumentError, NotFoundError
from unbindvs.scanner import clear_read_only, collect_files, delete_file, scan


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


def test_scan_buckets_files_recursively(tmp_path: Path) -> None:
    _write(tmp_path / "App.sln", "")
    _write(tmp_path / "src" / "App" / "App.csproj", "<Project />")
    _write(tmp_path / "src" / "App" / "App.vspscc", "")
    _write(tmp_path / "src" / "App" / "Program.cs", "")
    _write(tmp_path / "setup" / "Setup.vdproj", "")

    result = scan(tmp_path)

    root = tmp_path.resolve()
    assert result.solutions == [root / "App.sln"]
    assert result.projects == [root / "src" / "App" / "App.csproj"]
    assert result.deletions == [root / "src" / "App" / "App.vspscc"]
    assert result.total == 3


def test_scan_empty_directory(tmp_path: Path) -> None:
    _write(tmp_path / "readme.txt", "hi")
    assert scan(tmp_path).is_empty


def test_collect_files_is_sorted(tmp_path: Path) -> None:
    for name in ["b.txt", "a.txt", "c/d.txt"]:
        _write(tmp_path / name, "")
    files = collect_files(tmp_path)
    assert files == sorted(files, key=lambda p: p.as_posix())
    assert collect_files(tmp_path) == files


def test_missing_directory_raises(tmp_path: Path) -> None:
    with pytest.raises(NotFoundError):
        scan(tmp_path / "missing")


def test_file_is_not_a_directory(tmp_path: Path) -> None:
    _write(tmp_path / "file.txt", "")
    with pytest.raises(ArgumentError):
        collect_files(tmp_path / "file.txt")


def test_delete_read_only_file(tmp_path: Path) -> None:
    target = tmp_path / "App.vssscc"
    _write(target, "")
    target.chmod(stat.S_IREAD)

    delete_file(target)

    assert not target.exists()
    with pytest.raises(FileNotFoundError):
        target.read_text()


def test_delete_missing_file_propagates(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        delete_file(tmp_path / "gone.vspscc")


def test_clear_read_only(tmp_path: Path) -> None:
    target = tmp_path / "App.sln"
    _write(target, "")
    target.chmod(stat.S_IREAD)

    clear_read_only(target)

    assert target.stat().st_mode & stat.S_IWRITE


def test_unreadable_directory_is_fatal(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _write(tmp_path / "App.sln", "")
    _write(tmp_path / "locked" / "A.vssscc", "")
    real_scandir = os.scandir

    def scandir(path):
        if Path(path).name == "locked":
            raise PermissionError(13, "Permission denied", str(path))
        return real_scandir(path)

    monkeypatch.setattr(os, "scandir", scandir)

    with pytest.raises(PermissionError):
        collect_files(tmp_path)
