"""
Tests for the settings and their allow-lists.
"""

import pytest
from pydantic import ValidationError

from emis_party.config import Settings


class TestSettings:
    """Tests for the Settings class."""

    def test_default_values(self):
        settings = Settings(_env_file=None)
        assert settings.get_party_types_list() == ["Agency", "Committee", "Team", "Other"]
        assert settings.default_party_type == "Other"
        assert settings.get_party_ownerships_list() == ["Government", "Private", "NGO", "Other"]
        assert settings.get_disaster_phases_list() == ["Mitigation", "Preparedness", "Response", "Recovery"]
        assert settings.get_locales_list() == ["en", "sw"]
        assert settings.get_role_types_list() == ["System", "Assignable", "Other"]
        assert settings.api_prefix == "/v1"
        assert not settings.is_production

    def test_lists_are_trimmed(self):
        settings = Settings(_env_file=None, party_types=" Agency , Team,,", default_party_type="Team")
        assert settings.get_party_types_list() == ["Agency", "Team"]

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("LOCALES", "en,fr")
        monkeypatch.setenv("DEFAULT_LOCALE", "fr")
        monkeypatch.setenv("API_VERSION", "2")
        settings = Settings(_env_file=None)
        assert settings.get_locales_list() == ["en", "fr"]
        assert settings.default_locale == "fr"
        assert settings.api_prefix == "/v2"

    def test_default_outside_allow_list(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, default_party_type="Bogus")
        with pytest.raises(ValidationError):
            Settings(_env_file=None, default_role_type="Bogus")

    def test_empty_allow_list(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, disaster_phases="")
