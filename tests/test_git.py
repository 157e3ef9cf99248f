"""Tests for staged-file listing and directory expansion."""

import subprocess
from pathlib import Path

import pytest

from qualitygate.git.adapter import GitError, get_repo_root, get_staged_files
from qualitygate.git.files import collect_files, is_supported, walk_directory


class TestAdapter:
    def test_repo_root(self, tmp_git_repo: Path):
        assert get_repo_root(tmp_git_repo).resolve() == tmp_git_repo.resolve()

    def test_not_a_repo(self, tmp_path: Path):
        with pytest.raises(GitError):
            get_repo_root(tmp_path)

    def test_staged_files_exclude_deletions(self, tmp_git_repo: Path):
        (tmp_git_repo / "new.js").write_text("const a = 1;\n")
        (tmp_git_repo / "README.md").unlink()
        subprocess.run(["git", "add", "-A"], cwd=tmp_git_repo, capture_output=True, check=True)

        staged = get_staged_files(tmp_git_repo)
        assert [p.name for p in staged] == ["new.js"]
        assert staged[0].is_absolute()


class TestFiles:
    def test_is_supported(self):
        assert is_supported("a/b/page.HTM")
        assert is_supported("styles.scss")
        assert is_supported("component.tsx")
        assert not is_supported("README.md")

    def test_walk_skips_vendor_and_cache_dirs(self, tmp_path: Path):
        for rel in ("b.css", "a.js", "node_modules/lib.js", ".qualitygate/cache/x.js", "docs/readme.md", "docs/page.html"):
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("x")
        found = [p.relative_to(tmp_path).as_posix() for p in walk_directory(tmp_path)]
        assert found == ["a.js", "b.css", "docs/page.html"]

    def test_collect_keeps_explicit_unsupported_files(self, tmp_path: Path):
        notes = tmp_path / "notes.txt"
        notes.write_text("x")
        sub = tmp_path / "web"
        sub.mkdir()
        (sub / "main.js").write_text("x")
        (sub / "todo.txt").write_text("x")

        files = collect_files([notes, sub, notes])
        assert files == [notes, sub / "main.js"]
