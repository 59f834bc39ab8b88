"""
Generator configuration settings.

Values come from (highest precedence first) CLI overrides, an optional YAML
config file, ``FEED_GEN_*`` environment variables, a ``.env`` file and the
defaults below.
"""
import re
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from feedgen.data.profiles import FraudType

DEFAULT_CONFIG_NAME = ".feed-generator.yaml"

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")
_UNIT_SECONDS = {'h': 3600.0, 'm': 60.0, 's': 1.0, 'ms': 0.001}


def parse_duration(value: Union[str, int, float]) -> float:
    """
    Parse a duration such as "5m", "30s", "1h30m", "250ms" or a bare number
    of seconds.

    Returns:
        Duration in seconds

    Raises:
        ValueError: If the value is not a valid non-negative duration
    """
    if isinstance(value, (int, float)):
        seconds = float(value)
    else:
        text = value.strip().lower()
        try:
            seconds = float(text)
        except ValueError:
            parts = _DURATION_PART.findall(text)
            if not parts or "".join(num + unit for num, unit in parts) != text:
                raise ValueError(f"Invalid duration: {value!r}") from None
            seconds = sum(float(num) * _UNIT_SECONDS[unit] for num, unit in parts)

    if seconds < 0:
        raise ValueError(f"Duration must not be negative, got {value!r}")
    return seconds


class RedisSettings(BaseModel):
    """Redis stream connection"""
    host: str = "localhost"
    port: int = Field(6379, ge=1, le=65535)
    password: Optional[str] = None
    db: int = Field(0, ge=0)
    stream: str = "trades:stream"
    socket_timeout: float = Field(5.0, gt=0)
    maxlen: Optional[int] = Field(None, gt=0)

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


class GenerateSettings(BaseModel):
    """Generation loop settings"""
    tps: int = Field(100, ge=1, le=10000, description="Trades per second")
    duration: float = Field(300.0, ge=0, description="Run duration in seconds (0 = unbounded)")
    fraud_rate: float = Field(0.05, ge=0.0, le=1.0, description="Fraud pattern injection rate")
    fraud_type: FraudType = Field(FraudType.ALL, description="ALL, WASH, VELOCITY or ANOMALY")
    verbose: bool = False
    stats_interval: float = Field(10.0, gt=0, description="Statistics reporting interval in seconds")
    seed: Optional[int] = None
    api_port: int = Field(0, ge=0, le=65535, description="Stats API port (0 = disabled)")

    @field_validator('duration', 'stats_interval', mode='before')
    @classmethod
    def parse_durations(cls, v):
        if isinstance(v, str):
            return parse_duration(v)
        return v

    @field_validator('fraud_type', mode='before')
    @classmethod
    def normalize_fraud_type(cls, v):
        if isinstance(v, str):
            v = v.strip().upper()
        if v in (FraudType.NONE, FraudType.NONE.value):
            raise ValueError('fraud type must be one of ALL, WASH, VELOCITY, ANOMALY')
        return v


class ProfileRatios(BaseModel):
    """Category mix for normal trades"""
    hft_ratio: float = Field(0.20, ge=0.0, le=1.0)
    regular_ratio: float = Field(0.70, ge=0.0, le=1.0)
    casual_ratio: float = Field(0.10, ge=0.0, le=1.0)

    @model_validator(mode='after')
    def check_sum(self):
        total = self.hft_ratio + self.regular_ratio + self.casual_ratio
        if total < 0.99 or total > 1.01:
            raise ValueError(f'profile ratios must sum to 1.0, got {total:.2f}')
        return self


class Settings(BaseSettings):
    """Feed generator settings"""

    redis: RedisSettings = Field(default_factory=RedisSettings)
    generate: GenerateSettings = Field(default_factory=GenerateSettings)
    profiles: ProfileRatios = Field(default_factory=ProfileRatios)

    model_config = SettingsConfigDict(
        env_prefix="FEED_GEN_",
        env_nested_delimiter="__",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def find_config_file(config_file: Optional[Union[str, Path]] = None) -> Optional[Path]:
    """
    Resolve the YAML config file to read.

    An explicit path must exist. Without one, ``.feed-generator.yaml`` is
    looked up in the working directory, then the home directory.
    """
    if config_file:
        path = Path(config_file).expanduser()
        if not path.exists():
            raise FileNotFoundError(f"Config file not found at {path}")
        return path

    for directory in (Path.cwd(), Path.home()):
        candidate = directory / DEFAULT_CONFIG_NAME
        if candidate.exists():
            return candidate
    return None


def read_config_file(path: Path) -> Dict[str, Any]:
    with open(path, 'r') as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    return data


def load_settings(
    config_file: Optional[Union[str, Path]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> Settings:
    """
    Build validated settings.

    Args:
        config_file: Optional YAML file (see ``find_config_file``)
        overrides: Nested values that win over every other source

    Raises:
        pydantic.ValidationError: If any value is out of range
        FileNotFoundError: If an explicit config file is missing
    """
    values: Dict[str, Any] = {}

    path = find_config_file(config_file)
    if path is not None:
        values = read_config_file(path)

    if overrides:
        values = _deep_merge(values, overrides)

    return Settings(**values)
