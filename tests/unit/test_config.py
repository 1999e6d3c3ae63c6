"""Tests for SourceSettings: defaults and environment overrides."""

from __future__ import annotations

from artifactsource.config import SourceSettings, config


class TestSourceSettings:
    def test_defaults(self, monkeypatch):
        for name in ("GITHUB_TOKEN", "CLONE_DEPTH", "DEFAULT_BRANCH", "LOG_LEVEL"):
            monkeypatch.delenv(f"ARTIFACTSOURCE_{name}", raising=False)
        settings = SourceSettings(_env_file=None)
        assert settings.clone_depth == 10
        assert settings.default_branch == "master"
        assert settings.github_api_url == "https://api.github.com"
        assert settings.binary_sample_size == 8000
        assert not settings.has_token

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("ARTIFACTSOURCE_GITHUB_TOKEN", "ghp_test")
        monkeypatch.setenv("ARTIFACTSOURCE_CLONE_DEPTH", "50")
        settings = SourceSettings(_env_file=None)
        assert settings.github_token == "ghp_test"
        assert settings.clone_depth == 50
        assert settings.has_token

    def test_blank_token_is_no_token(self):
        assert not SourceSettings(_env_file=None, github_token="   ").has_token

    def test_module_singleton(self):
        assert isinstance(config, SourceSettings)
