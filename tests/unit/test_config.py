"""Unit tests for settings loading."""

import logging

import pytest
from pydantic import ValidationError

from bios_updater.config import UpdaterSettings, load_settings


@pytest.mark.unit
class TestSettings:
    """Test UpdaterSettings and load_settings."""

    def test_defaults(self):
        settings = load_settings({})

        assert settings.catalog_url == "https://downloads.dell.com/catalog/CatalogIndexPC.cab"
        assert settings.base_url == "https://downloads.dell.com/"
        assert settings.catalog_file == "CatalogIndexPC.xml"
        assert settings.tmp_dir == "./tmp"

    def test_environment_overrides(self):
        settings = load_settings({
            "BIOS_UPDATER_BASE_URL": "http://mirror.local/dell",
            "BIOS_UPDATER_PORT": "9000",
            "BIOS_UPDATER_DOWNLOAD_TIMEOUT": "5.5",
            "UNRELATED": "x",
        })

        assert settings.base_url == "http://mirror.local/dell"
        assert settings.port == 9000
        assert settings.download_timeout == 5.5

    def test_invalid_override_rejected(self):
        with pytest.raises(ValidationError):
            load_settings({"BIOS_UPDATER_CATALOG_URL": "ftp://nope"})

    def test_reads_os_environ(self, monkeypatch):
        monkeypatch.setenv("BIOS_UPDATER_TMP_DIR", "/var/tmp/bios")

        assert load_settings().tmp_dir == "/var/tmp/bios"

    @pytest.mark.parametrize(
        "base,path,expected",
        [
            ("https://downloads.dell.com/", "FOLDER/1/a.cab", "https://downloads.dell.com/FOLDER/1/a.cab"),
            ("https://downloads.dell.com", "/FOLDER/1/a.cab", "https://downloads.dell.com/FOLDER/1/a.cab"),
            ("http://mirror.local/dell/", "x.exe", "http://mirror.local/dell/x.exe"),
        ],
    )
    def test_resolve_url(self, base, path, expected):
        assert UpdaterSettings(base_url=base).resolve_url(path) == expected

    def test_log_level_value(self):
        assert UpdaterSettings(log_level="debug").log_level_value == logging.DEBUG
        assert UpdaterSettings(log_level="bogus").log_level_value == logging.INFO
