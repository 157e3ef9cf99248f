"""Tests for pre-commit hook installation."""

import subprocess
from pathlib import Path

from qualitygate.hooks.installer import install_hook, uninstall_hook


def _hook(repo: Path) -> Path:
    return repo / ".git" / "hooks" / "pre-commit"


class TestInstall:
    def test_fresh_install(self, tmp_git_repo: Path):
        ok, _ = install_hook(tmp_git_repo)
        assert ok
        script = _hook(tmp_git_repo).read_text()
        assert script.startswith("#!/bin/sh")
        assert "exec qualitygate check --staged" in script

    def test_idempotent(self, tmp_git_repo: Path):
        install_hook(tmp_git_repo)
        ok, msg = install_hook(tmp_git_repo)
        assert ok
        assert "already installed" in msg

    def test_not_a_repo(self, tmp_path: Path):
        ok, msg = install_hook(tmp_path)
        assert not ok
        assert "Not a git repository" in msg

    def test_force_keeps_backup_and_uninstall_restores(self, tmp_git_repo: Path):
        hook = _hook(tmp_git_repo)
        hook.parent.mkdir(parents=True, exist_ok=True)
        hook.write_text("#!/bin/sh\necho mine\n")

        ok, _ = install_hook(tmp_git_repo)
        assert not ok
        assert hook.read_text() == "#!/bin/sh\necho mine\n"

        ok, msg = install_hook(tmp_git_repo, force=True)
        assert ok
        assert "pre-commit.qualitygate-backup" in msg
        assert "qualitygate check" in hook.read_text()

        ok, _ = uninstall_hook(tmp_git_repo)
        assert ok
        assert hook.read_text() == "#!/bin/sh\necho mine\n"
        assert not hook.with_name("pre-commit.qualitygate-backup").exists()

    def test_respects_core_hooks_path(self, tmp_git_repo: Path):
        subprocess.run(
            ["git", "config", "core.hooksPath", "githooks"],
            cwd=tmp_git_repo, capture_output=True, check=True,
        )
        ok, _ = install_hook(tmp_git_repo)
        assert ok
        assert (tmp_git_repo / "githooks" / "pre-commit").exists()
        assert not _hook(tmp_git_repo).exists()


class TestUninstall:
    def test_nothing_installed(self, tmp_git_repo: Path):
        ok, msg = uninstall_hook(tmp_git_repo)
        assert ok
        assert "nothing to remove" in msg

    def test_removes_own_hook(self, tmp_git_repo: Path):
        install_hook(tmp_git_repo)
        ok, _ = uninstall_hook(tmp_git_repo)
        assert ok
        assert not _hook(tmp_git_repo).exists()
