"""
Configuration management using Pydantic models loaded from YAML.
"""

import logging
from pathlib import Path
from typing import List

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.exceptions import ExclusionError
from .domain.exclusion import ExclusionRule, RuleKind


logger = logging.getLogger(__name__)


class ExclusionConfig(BaseModel):
    """Exclusion rule configuration."""
    timezone: str = "Europe/Berlin"
    validate_blocks_on_load: bool = False
    exclusions: List[str] = Field(default_factory=list)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA identifier."""
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: '{value}'") from exc
        return value

    @field_validator("exclusions")
    @classmethod
    def validate_exclusions(cls, value: List[str]) -> List[str]:
        """Ensure every line is a recognized exclusion rule."""
        lines: List[str] = []
        for position, line in enumerate(value, 1):
            if not line.strip():
                continue
            try:
                ExclusionRule.parse(line)
            except ExclusionError as exc:
                raise ValueError(f"Exclusion #{position}: {exc}") from exc
            lines.append(line)
        return lines

    @model_validator(mode="after")
    def validate_blocks(self) -> "ExclusionConfig":
        """Optionally check time blocks and dates now instead of at expansion."""
        if not self.validate_blocks_on_load:
            return self

        for position, rule in enumerate(self.get_rules(), 1):
            try:
                if rule.kind is RuleKind.WEEKDAY:
                    rule.time_blocks()
                else:
                    rule.day()
            except ExclusionError as exc:
                raise ValueError(f"Exclusion #{position}: {exc}") from exc

        logger.debug("Validated time blocks of %d exclusion(s)", len(self.exclusions))
        return self

    def get_rules(self) -> List[ExclusionRule]:
        """Get the configured lines as parsed rules."""
        return [ExclusionRule.parse(line) for line in self.exclusions]

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "ExclusionConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            ExclusionConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create an exclusions.yaml file. See exclusions.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)
        logger.info("Loaded %d exclusion(s) from %s", len(config.exclusions), config_path)
        return config


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for exclusions.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "exclusions.yaml"

    if not config_path.exists():
        # Try in the project root (parent of timeexclusions/)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "exclusions.yaml"

    return config_path
