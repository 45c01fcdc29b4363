"""
Settings Service for Signage Server.

Global signage settings (branding, default item duration, player refresh
interval, weather widget) stored in the settings table. Keys missing from
the table fall back to the configured defaults.
"""

import logging
from typing import Any, Dict

from flask import current_app

from signage.models import db, Setting


logger = logging.getLogger(__name__)


class SettingsValidationError(ValueError):
    """Raised when a settings update contains an unknown key or bad value."""
    pass


# (type, min, max) constraints per setting; None means unbounded
_CONSTRAINTS = {
    'school_name': (str, None, None),
    'primary_color': (str, None, None),
    'secondary_color': (str, None, None),
    'logo_url': (str, None, None),
    'default_duration': (int, 5, 120),
    'refresh_interval': (int, 10, 300),
    'enable_weather': (bool, None, None),
    'weather_location': (str, None, None),
}


class SettingsService:
    """Read and write global settings."""

    @staticmethod
    def defaults() -> Dict[str, Any]:
        return dict(current_app.config['DEFAULT_SETTINGS'])

    @classmethod
    def get_all(cls) -> Dict[str, Any]:
        """
        Get every setting, stored values overriding defaults.

        Returns:
            Dictionary of setting name to value
        """
        values = cls.defaults()
        for setting in Setting.query.all():
            if setting.key in values:
                values[setting.key] = setting.get_value()
        return values

    @classmethod
    def get(cls, key: str) -> Any:
        """
        Get one setting value.

        Raises:
            KeyError: If the key is not a known setting
        """
        defaults = cls.defaults()
        if key not in defaults:
            raise KeyError(key)
        setting = db.session.get(Setting, key)
        return setting.get_value() if setting else defaults[key]

    @classmethod
    def validate(cls, values: Dict[str, Any]) -> None:
        """
        Validate a partial settings update.

        Raises:
            SettingsValidationError: On unknown keys, wrong types or out-of-range numbers
        """
        if not isinstance(values, dict) or not values:
            raise SettingsValidationError('settings object is required')

        for key, value in values.items():
            if key not in _CONSTRAINTS:
                raise SettingsValidationError(f'Unknown setting: {key}')

            expected, low, high = _CONSTRAINTS[key]
            # bool is a subclass of int; reject it for numeric settings
            if expected is int and isinstance(value, bool):
                raise SettingsValidationError(f'{key} must be an integer')
            if not isinstance(value, expected):
                raise SettingsValidationError(f'{key} must be of type {expected.__name__}')
            if low is not None and value < low:
                raise SettingsValidationError(f'{key} must be at least {low}')
            if high is not None and value > high:
                raise SettingsValidationError(f'{key} must be at most {high}')

    @classmethod
    def set_many(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        """
        Validate and store several settings in one commit.

        Args:
            values: Partial mapping of setting name to new value

        Returns:
            The full settings mapping after the update

        Raises:
            SettingsValidationError: If validation fails (nothing is stored)
        """
        cls.validate(values)

        for key, value in values.items():
            setting = db.session.get(Setting, key)
            if setting is None:
                setting = Setting(key=key)
                db.session.add(setting)
            setting.set_value(value)

        db.session.commit()
        logger.info(f"Updated settings: {', '.join(sorted(values))}")
        return cls.get_all()
