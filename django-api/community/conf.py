"""App settings with defaults, overridable through ``settings.COMMUNITY``."""

from django.conf import settings

DEFAULTS = {
    "PAGE_SIZE": 20,
    "TOKEN_MAX_AGE": 60 * 60 * 24,
    "TOKEN_SALT": "community.acting-user",
}


def get_setting(name: str):
    return getattr(settings, "COMMUNITY", {}).get(name, DEFAULTS[name])
