import os
import yaml
from pydantic import ValidationError

from models import DAILY_GOAL
from settings_schema import SettingsSchema, validate_settings

APP_VERSION = "1.0.0"


class YamlConfig:
    """Load and save user settings to a YAML file."""

    def __init__(self, path: str = "settings.yaml") -> None:
        self.path = path

    def load(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} must contain a mapping")
        return data

    def save(self, data: dict) -> None:
        validate_settings(data)
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(dict(data), f)

    def settings(self) -> SettingsSchema:
        """Return stored settings with defaults filled in.

        An invalid stored goal is replaced by the default goal; any other
        invalid value raises ``ValueError``.
        """
        data = self.load()
        data["daily_goal"] = self._goal_from(data)
        try:
            return SettingsSchema(**data)
        except ValidationError as e:
            raise ValueError(str(e))

    @staticmethod
    def _goal_from(data: dict) -> int:
        value = data.get("daily_goal")
        if isinstance(value, int) and not isinstance(value, bool) and value > 0:
            return value
        return DAILY_GOAL

    def daily_goal(self) -> int:
        """Return the stored goal, or the default if it is missing or invalid."""
        return self._goal_from(self.load())

    def set_daily_goal(self, goal: int) -> None:
        data = self.load()
        data["daily_goal"] = goal
        self.save(data)
