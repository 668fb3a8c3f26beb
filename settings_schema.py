from pydantic import BaseModel, Field, ValidationError, field_validator
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from models import DAILY_GOAL
from algorithms import SetExtractor

class SettingsSchema(BaseModel):
    daily_goal: int = Field(default=DAILY_GOAL, gt=0)
    max_reps_per_set: int = Field(default=SetExtractor.MAX_REPS, gt=0)
    timezone: str = "local"
    warning_display_limit: int = Field(default=5, ge=0)

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        if value == "local":
            return value
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"unknown timezone: {value}")
        return value

def validate_settings(data: dict) -> None:
    try:
        SettingsSchema(**data)
    except ValidationError as e:
        raise ValueError(str(e))
