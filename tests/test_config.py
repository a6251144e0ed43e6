"""Tests for configuration loading."""

import os
from unittest.mock import patch

from cronofy_client import config


class TestEnvFile:
    """Test .env loading."""

    def test_loads_values(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text(
            "# comment\n"
            "CRONOFY_TEST_ONE=plain\n"
            "CRONOFY_TEST_TWO=\"quoted value\"\n"
            "not a setting\n"
        )

        with patch.dict(os.environ):
            os.environ.pop("CRONOFY_TEST_ONE", None)
            os.environ.pop("CRONOFY_TEST_TWO", None)

            loaded = config._load_env_file(env_file)

            assert loaded == {"CRONOFY_TEST_ONE": "plain", "CRONOFY_TEST_TWO": "quoted value"}
            assert os.environ["CRONOFY_TEST_TWO"] == "quoted value"

    def test_environment_takes_precedence(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CRONOFY_TEST_ONE", "from-env")
        env_file = tmp_path / ".env"
        env_file.write_text("CRONOFY_TEST_ONE=from-file\n")

        assert config._load_env_file(env_file) == {}
        assert os.environ["CRONOFY_TEST_ONE"] == "from-env"

    def test_missing_file(self, tmp_path):
        assert config._load_env_file(tmp_path / ".env") == {}


class TestUrls:
    def test_defaults(self):
        assert config.api_url() == "https://api.cronofy.com"
        assert config.app_url() == "https://app.cronofy.com"

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("CRONOFY_API_URL", "https://api-uk.cronofy.com/")
        monkeypatch.setenv("CRONOFY_APP_URL", "https://app-uk.cronofy.com")
        assert config.api_url() == "https://api-uk.cronofy.com"
        assert config.app_url() == "https://app-uk.cronofy.com"


class TestCredentialStatus:
    def test_status(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CRONOFY_CLIENT_ID", "id")
        with (
            patch.object(config, "ENV_FILE", tmp_path / ".env"),
            patch.object(config, "TOKEN_FILE", tmp_path / "token.json"),
        ):
            status = config.get_credential_status()

        assert status["client_id"] is True
        assert status["client_secret"] is False
        assert status["env_file"] is False
        assert status["token"] is False
