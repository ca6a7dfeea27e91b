"""Tests for relocatable path helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from docbridge.paths import PathRelocationError, relative_invariant_path, resolve_relative_path


def test_relative_path_uses_forward_slashes(tmp_path: Path) -> None:
    target = tmp_path / "images" / "logo.svg"
    target.parent.mkdir()
    target.write_text("<svg/>", encoding="utf-8")

    assert relative_invariant_path(target, tmp_path) == "images/logo.svg"


def test_relative_path_rejects_files_outside_root(tmp_path: Path) -> None:
    root = tmp_path / "components"
    root.mkdir()

    with pytest.raises(PathRelocationError):
        relative_invariant_path(tmp_path / "elsewhere.css", root)


def test_resolve_relative_path_rebuilds_under_new_root(tmp_path: Path) -> None:
    (tmp_path / "images").mkdir()
    (tmp_path / "images" / "logo.svg").write_text("<svg/>", encoding="utf-8")

    assert resolve_relative_path("images/logo.svg", tmp_path) == tmp_path / "images" / "logo.svg"


@pytest.mark.parametrize("relative", ["/etc/passwd", "../outside.css", "images/../../x"])
def test_resolve_relative_path_rejects_escapes(tmp_path: Path, relative: str) -> None:
    with pytest.raises(PathRelocationError):
        resolve_relative_path(relative, tmp_path, must_exist=False)


def test_resolve_relative_path_requires_existing_file(tmp_path: Path) -> None:
    with pytest.raises(PathRelocationError, match="does not contain"):
        resolve_relative_path("templates", tmp_path)

    assert resolve_relative_path("templates", tmp_path, must_exist=False) == tmp_path / "templates"


def test_relative_path_keeps_symlinks_inside_root(tmp_path: Path) -> None:
    shared = tmp_path / "shared"
    shared.mkdir()
    (shared / "logo.svg").write_text("<svg/>", encoding="utf-8")
    root = tmp_path / "components"
    (root / "images").mkdir(parents=True)
    link = root / "images" / "logo.svg"
    link.symlink_to(shared / "logo.svg")

    assert relative_invariant_path(link, root) == "images/logo.svg"


def test_relative_path_normalizes_parent_segments(tmp_path: Path) -> None:
    root = tmp_path / "components"

    assert relative_invariant_path(root / "styles" / ".." / "logo.svg", root) == "logo.svg"
    with pytest.raises(PathRelocationError):
        relative_invariant_path(root / ".." / "logo.svg", root)
