from __future__ import annotations
from typing import Annotated, Any, List, Union

from pydantic import BeforeValidator, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_list(v: Any) -> Any:
    # "a,b" from the environment as well as JSON lists
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",") if i.strip()]
    return v


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True, extra="ignore")

    PROJECT_NAME: str = "Roster API"
    DATABASE_URL: str = "sqlite:///./roster.db"
    BACKEND_CORS_ORIGINS: Annotated[Union[List[str], str], BeforeValidator(parse_list)] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    # display value used when an employee has no preferred start
    DEFAULT_SHIFT_START: str = "5 PM"
    # offsets from a Monday week start that count as weekend (Fri, Sat, Sun)
    WEEKEND_OFFSETS: Annotated[Union[List[int], str], BeforeValidator(parse_list)] = [4, 5, 6]

    SEED_DEFAULT_RULES: bool = True
    CREATE_TABLES_ON_STARTUP: bool = True
    LOG_LEVEL: str = "INFO"

    @field_validator("WEEKEND_OFFSETS", mode="after")
    @classmethod
    def offsets_in_week(cls, v) -> List[int]:
        offsets = sorted({int(o) for o in v})
        if any(o < 0 or o > 6 for o in offsets):
            raise ValueError("weekend offsets must be between 0 and 6")
        return offsets


settings = Settings()
