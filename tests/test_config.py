"""Tests for runtime settings."""

import pytest

from recordkit.config import (
    DEFAULT_FULL_MESSAGE_FORMAT,
    DEFAULT_MESSAGES,
    Settings,
    get_settings,
    load_messages,
    reset_settings,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("RECORDKIT_FULL_MESSAGE_FORMAT", raising=False)
    monkeypatch.delenv("RECORDKIT_MESSAGES_PATH", raising=False)
    reset_settings()
    yield
    reset_settings()


class TestSettings:
    def test_defaults(self):
        settings = Settings.from_env()
        assert settings.full_message_format == DEFAULT_FULL_MESSAGE_FORMAT
        assert settings.messages == DEFAULT_MESSAGES

    def test_defaults_are_not_shared(self):
        Settings().messages["blank"] = "changed"
        assert Settings().messages["blank"] == "can't be blank"

    def test_format_from_env(self, monkeypatch):
        monkeypatch.setenv("RECORDKIT_FULL_MESSAGE_FORMAT", "{attribute}: {message}")
        assert Settings.from_env().full_message_format == "{attribute}: {message}"

    def test_messages_from_env(self, monkeypatch, tmp_path):
        path = tmp_path / "messages.yaml"
        path.write_text('blank: "must be filled in"\ntoo_short: "needs {count}+"\n')
        monkeypatch.setenv("RECORDKIT_MESSAGES_PATH", str(path))

        settings = Settings.from_env()

        assert settings.message_for("blank") == "must be filled in"
        assert settings.message_for("too_short", count=2) == "needs 2+"
        assert settings.message_for("odd") == "must be odd"

    def test_message_for(self):
        settings = Settings()
        assert settings.message_for("greater_than", count=5) == "must be greater than 5"
        assert settings.message_for("unknown_code") == "is invalid"

    def test_message_for_missing_placeholder(self):
        assert Settings().message_for("too_short") == (
            "is too short (minimum is {count} characters)"
        )


class TestLoadMessages:
    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_messages(path) == {}

    def test_rejects_non_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- blank\n- odd\n")
        with pytest.raises(ValueError, match="mapping"):
            load_messages(path)


class TestGetSettings:
    def test_cached(self):
        assert get_settings() is get_settings()

    def test_reset(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("RECORDKIT_FULL_MESSAGE_FORMAT", "{message}")
        assert get_settings() is first

        reset_settings()

        assert get_settings().full_message_format == "{message}"
