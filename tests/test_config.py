"""Tests for config loading and env overrides."""

import dataclasses
import textwrap
from pathlib import Path

import pytest

from qualitygate.config.defaults import DEFAULT_TOML
from qualitygate.config.loader import CONFIG_FILENAME, ConfigError, load_config
from qualitygate.config.schema import QualityGateConfig, level_at_or_above


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("QUALITYGATE_JOBS", "QUALITYGATE_TIMEOUT", "QUALITYGATE_NO_CACHE", "QUALITYGATE_MIN_SCORE"):
        monkeypatch.delenv(name, raising=False)


class TestLoadConfig:
    def test_defaults_without_file(self, tmp_path: Path):
        cfg = load_config(tmp_path)
        assert cfg == QualityGateConfig()
        assert cfg.analysis.parallelism == 4
        assert cfg.thresholds.max_selectors == 50
        assert cfg.thresholds.max_complexity == 10
        assert cfg.thresholds.min_score == 70

    def test_default_template_parses_to_defaults(self, tmp_path: Path):
        (tmp_path / CONFIG_FILENAME).write_text(DEFAULT_TOML)
        assert load_config(tmp_path) == QualityGateConfig()

    def test_custom_values(self, tmp_path: Path):
        (tmp_path / CONFIG_FILENAME).write_text(textwrap.dedent("""\
            [analysis]
            parallelism = 8
            timeout_seconds = 5

            [rules]
            disable = ["JS_UNUSED_VARIABLE", "HTML_IMG_LAZY"]

            [thresholds]
            max_complexity = 15
        """))
        cfg = load_config(tmp_path)
        assert cfg.analysis.parallelism == 8
        assert cfg.analysis.timeout_seconds == 5
        assert cfg.rules.disable == ("JS_UNUSED_VARIABLE", "HTML_IMG_LAZY")
        assert cfg.thresholds.max_complexity == 15
        assert cfg.thresholds.min_score == 70

    def test_unknown_keys_ignored(self, tmp_path: Path):
        (tmp_path / CONFIG_FILENAME).write_text(textwrap.dedent("""\
            [analysis]
            parallelism = 2
            turbo = true

            [plugins]
            anything = 1
        """))
        assert load_config(tmp_path).analysis.parallelism == 2

    def test_invalid_toml(self, tmp_path: Path):
        (tmp_path / CONFIG_FILENAME).write_text("[analysis\nparallelism = ")
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_section_must_be_table(self, tmp_path: Path):
        (tmp_path / CONFIG_FILENAME).write_text('analysis = "fast"\n')
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_explicit_override_path(self, tmp_path: Path):
        other = tmp_path / "ci.toml"
        other.write_text("[thresholds]\nmin_score = 90\n")
        assert load_config(tmp_path, str(other)).thresholds.min_score == 90

    def test_missing_override_path(self, tmp_path: Path):
        with pytest.raises(ConfigError):
            load_config(tmp_path, str(tmp_path / "nope.toml"))


class TestEnvOverrides:
    def test_overrides_applied(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("QUALITYGATE_JOBS", "2")
        monkeypatch.setenv("QUALITYGATE_TIMEOUT", "1.5")
        monkeypatch.setenv("QUALITYGATE_NO_CACHE", "1")
        monkeypatch.setenv("QUALITYGATE_MIN_SCORE", "85")
        cfg = load_config(tmp_path)
        assert cfg.analysis.parallelism == 2
        assert cfg.analysis.timeout_seconds == 1.5
        assert cfg.cache.enabled is False
        assert cfg.thresholds.min_score == 85

    def test_garbage_values_ignored(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("QUALITYGATE_JOBS", "many")
        monkeypatch.setenv("QUALITYGATE_MIN_SCORE", "high")
        cfg = load_config(tmp_path)
        assert cfg.analysis.parallelism == 4
        assert cfg.thresholds.min_score == 70

    def test_jobs_floor_is_one(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("QUALITYGATE_JOBS", "0")
        assert load_config(tmp_path).analysis.parallelism == 1


class TestSchema:
    def test_frozen(self):
        cfg = QualityGateConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            cfg.version = "2.0"

    def test_fingerprint_tracks_analysis_settings(self):
        base = QualityGateConfig()
        tweaked = dataclasses.replace(
            base, thresholds=dataclasses.replace(base.thresholds, max_complexity=20)
        )
        assert base.fingerprint() == QualityGateConfig().fingerprint()
        assert base.fingerprint() != tweaked.fingerprint()

    def test_fingerprint_ignores_runtime_settings(self):
        base = QualityGateConfig()
        faster = dataclasses.replace(
            base, analysis=dataclasses.replace(base.analysis, parallelism=16)
        )
        assert base.fingerprint() == faster.fingerprint()

    def test_level_ordering(self):
        assert level_at_or_above("high", "medium")
        assert level_at_or_above("medium", "medium")
        assert not level_at_or_above("low", "medium")
