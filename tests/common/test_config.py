from __future__ import annotations

import pytest

from objstore.common import config
from objstore.common.config import Settings, get_settings


@pytest.fixture()
def no_env_file(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "ENV_FILE", tmp_path / ".env")
    yield tmp_path / ".env"
    get_settings.cache_clear()  # type: ignore[attr-defined]


class TestSettings:
    def test_defaults(self):
        settings = Settings()

        assert settings.S3_REGION == "us-east-1"
        assert settings.S3_USE_SSL is True
        assert settings.S3_ADDRESSING_STYLE == "path"
        assert settings.S3_CONTENT_TYPE == "application/octet-stream"
        assert settings.S3_LIST_MAX_KEYS == 1000
        assert settings.ENABLE_METRICS is True

    def test_normalizes_addressing_style(self):
        assert Settings(S3_ADDRESSING_STYLE=" Virtual ").S3_ADDRESSING_STYLE == "virtual"

    def test_rejects_unknown_addressing_style(self):
        with pytest.raises(ValueError, match="S3_ADDRESSING_STYLE"):
            Settings(S3_ADDRESSING_STYLE="dns")

    @pytest.mark.parametrize("max_keys", [0, 1001])
    def test_rejects_out_of_range_max_keys(self, max_keys):
        with pytest.raises(ValueError, match="S3_LIST_MAX_KEYS"):
            Settings(S3_LIST_MAX_KEYS=max_keys)


class TestFromEnvironment:
    def test_reads_environment(self, monkeypatch, no_env_file):
        monkeypatch.setenv("S3_ENDPOINT_URL", "http://localhost:9000")
        monkeypatch.setenv("S3_REGION", "eu-west-1")
        monkeypatch.setenv("S3_USE_SSL", "false")
        monkeypatch.setenv("S3_LIST_MAX_KEYS", "250")
        monkeypatch.setenv("ENABLE_METRICS", "no")

        settings = Settings.from_environment()

        assert settings.S3_ENDPOINT_URL == "http://localhost:9000"
        assert settings.S3_REGION == "eu-west-1"
        assert settings.S3_USE_SSL is False
        assert settings.S3_LIST_MAX_KEYS == 250
        assert settings.ENABLE_METRICS is False

    def test_env_file_does_not_override_environment(self, monkeypatch, no_env_file):
        no_env_file.write_text(
            "# local minio\n"
            "S3_ACCESS_KEY_ID='from-file'\n"
            'S3_SECRET_ACCESS_KEY="file-secret"\n'
            "S3_REGION=ap-south-1\n",
            encoding="utf-8",
        )
        monkeypatch.setenv("S3_REGION", "eu-west-1")
        # register the keys so values loaded from the file are undone afterwards
        for name in ("S3_ACCESS_KEY_ID", "S3_SECRET_ACCESS_KEY"):
            monkeypatch.setenv(name, "placeholder")
            monkeypatch.delenv(name)

        settings = Settings.from_environment()

        assert settings.S3_ACCESS_KEY_ID == "from-file"
        assert settings.S3_SECRET_ACCESS_KEY == "file-secret"
        assert settings.S3_REGION == "eu-west-1"

    def test_get_settings_is_cached(self, no_env_file):
        get_settings.cache_clear()  # type: ignore[attr-defined]

        assert get_settings() is get_settings()
