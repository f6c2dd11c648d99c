from emis_party.config.settings import Settings, settings

__all__ = ["Settings", "settings"]
