"""Tests for configuration and the command line."""

from unittest.mock import patch

import pytest
from google.api_core import exceptions as gcp_exceptions


class TestSettings:
    """Test Settings defaults and secret loading."""

    def test_defaults(self, mock_settings):
        assert mock_settings.moderation_model == "omni-moderation-latest"
        assert mock_settings.discussion_model == "ft:gpt-3.5-turbo-0125:personal::AliZC6m5"
        assert mock_settings.image_model == "dall-e-3"
        assert mock_settings.flyer_venue == "KFC, Ikeja ICM"
        assert mock_settings.flyer_time == "7pm on Friday"
        assert mock_settings.poll_interval_seconds == 60
        assert mock_settings.status_reset_delay_seconds == 0.5
        assert mock_settings.google_project_id is None

    def test_env_override(self, monkeypatch):
        from bibletalk.config import Settings

        monkeypatch.setenv("FLYER_VENUE", "Lagos Hall")
        monkeypatch.setenv("POLL_INTERVAL_SECONDS", "30")

        settings = Settings()

        assert settings.flyer_venue == "Lagos Hall"
        assert settings.poll_interval_seconds == 30

    def test_api_key_from_secret_manager(self, monkeypatch):
        from bibletalk.config import Settings

        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        monkeypatch.setenv("GOOGLE_PROJECT_ID", "bibletalk-prod")
        monkeypatch.setenv("ENVIRONMENT", "prod")
        with patch("bibletalk.config._get_secret_value", return_value="sk-secret") as mock_get:
            settings = Settings()

        assert settings.openai_api_key == "sk-secret"
        mock_get.assert_called_once_with("bibletalk-prod", "prod")

    def test_env_api_key_wins_over_secret_manager(self, monkeypatch):
        from bibletalk.config import Settings

        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        monkeypatch.setenv("GOOGLE_PROJECT_ID", "bibletalk-prod")
        with patch("bibletalk.config._get_secret_value") as mock_get:
            settings = Settings()

        assert settings.openai_api_key == "sk-env"
        mock_get.assert_not_called()

    def test_secret_manager_skipped_without_project(self, monkeypatch):
        from bibletalk.config import Settings

        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        with patch("bibletalk.config._get_secret_value") as mock_get:
            settings = Settings()

        assert settings.openai_api_key == ""
        mock_get.assert_not_called()


class TestSecretManager:
    """Test the OpenAI key lookup."""

    def test_secret_path_per_environment(self):
        from bibletalk.secret_manager import openai_key_secret_path

        assert openai_key_secret_path("my-project", "prod") == (
            "projects/my-project/secrets/bibletalk-openai-api-key-prod/versions/latest"
        )

    def test_fetch_reads_latest_version(self):
        from bibletalk.secret_manager import fetch_openai_api_key

        with patch("bibletalk.secret_manager.secretmanager.SecretManagerServiceClient") as mock_cls:
            mock_cls.secret_version_path.return_value = "projects/p/secrets/s/versions/latest"
            access = mock_cls.return_value.access_secret_version
            access.return_value.payload.data = b"sk-secret\n"

            assert fetch_openai_api_key("p", "dev") == "sk-secret"

        access.assert_called_once_with(name="projects/p/secrets/s/versions/latest")
        mock_cls.secret_version_path.assert_called_once_with(
            "p", "bibletalk-openai-api-key-dev", "latest"
        )

    def test_fetch_returns_none_when_secret_missing(self):
        from bibletalk.secret_manager import fetch_openai_api_key

        with patch("bibletalk.secret_manager.secretmanager.SecretManagerServiceClient") as mock_cls:
            mock_cls.secret_version_path.return_value = "projects/p/secrets/s/versions/latest"
            mock_cls.return_value.access_secret_version.side_effect = gcp_exceptions.NotFound(
                "missing"
            )

            assert fetch_openai_api_key("p", "dev") is None


class TestCommandLine:
    """Test CLI argument parsing."""

    def test_serve_arguments(self):
        from bibletalk.main import build_parser

        args = build_parser().parse_args(["serve", "--port", "9000"])

        assert args.command == "serve"
        assert args.port == 9000

    def test_fine_tune_defaults(self):
        from bibletalk.main import build_parser

        args = build_parser().parse_args(["fine-tune"])

        assert args.training_file == "data/bibletalk.jsonl"
        assert args.base_model == "gpt-3.5-turbo"

    def test_command_is_required(self):
        from bibletalk.main import build_parser

        with pytest.raises(SystemExit):
            build_parser().parse_args([])
