"""Shared test fixtures — sample sources, configs, temp git repos."""

from __future__ import annotations

import subprocess
import textwrap
from pathlib import Path

import pytest

from qualitygate.config.schema import QualityGateConfig
from qualitygate.rules.registry import RuleRegistry, build_registry


@pytest.fixture
def config() -> QualityGateConfig:
    return QualityGateConfig()


@pytest.fixture
def registry(config: QualityGateConfig, tmp_path: Path) -> RuleRegistry:
    return build_registry(config, tmp_path)


@pytest.fixture
def clean_markup() -> str:
    return textwrap.dedent("""\
        <!DOCTYPE html>
        <html lang="en">
        <head>
          <meta charset="utf-8">
          <title>Demo</title>
          <script src="app.js" defer></script>
        </head>
        <body>
          <h1>Title</h1>
          <h2>Section</h2>
          <img src="logo.png" alt="Logo" loading="lazy">
          <p>Hello<br>world</p>
        </body>
        </html>
    """)


@pytest.fixture
def clean_stylesheet() -> str:
    return textwrap.dedent("""\
        .header { color: #333; margin: 0; }
        #main { padding: 1rem; }
        .footer a { text-decoration: none; }
    """)


@pytest.fixture
def clean_script() -> str:
    return textwrap.dedent("""\
        const items = [1, 2, 3];
        export async function total() {
          const values = await Promise.resolve(items);
          return values.reduce((a, b) => a + b, 0);
        }
    """)


@pytest.fixture
def unbalanced_stylesheet() -> str:
    """Three opening braces, two closing."""
    return textwrap.dedent("""\
        a { color: red; }
        b { margin: 0;
        c { padding: 0; }
    """)


@pytest.fixture
def project(tmp_path: Path):
    """Factory writing files under a temp project dir; returns their paths."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / "project" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository for integration tests."""
    subprocess.run(["git", "init", str(tmp_path)], capture_output=True, check=True)
    subprocess.run(
        ["git", "config", "user.email", "test@test.com"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    subprocess.run(
        ["git", "config", "user.name", "Test"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    readme = tmp_path / "README.md"
    readme.write_text("# Test\n")
    subprocess.run(["git", "add", "."], cwd=tmp_path, capture_output=True, check=True)
    subprocess.run(
        ["git", "commit", "-m", "init"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    return tmp_path
