from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, StrictBool, ValidationError

from core.actions import ActionKind

GATED_KINDS = (ActionKind.NAVIGATE_TO_URL, ActionKind.CLICK_ELEMENT, ActionKind.FILL_FORM)


class PolicyConfig(BaseModel):
    """Resolved policy used by the guard. Every field has a concrete value."""

    model_config = ConfigDict(frozen=True)

    navigation_enabled: bool = False
    capability_flags: Dict[ActionKind, bool] = Field(
        default_factory=lambda: {kind: False for kind in GATED_KINDS}
    )
    blocked_domain_patterns: Tuple[str, ...] = ()
    allowed_domain_patterns: Tuple[str, ...] = ()
    max_actions_per_session: int = Field(50, ge=0)
    log_actions: bool = True

    @classmethod
    def disabled(cls) -> "PolicyConfig":
        return cls(navigation_enabled=False)

    def capability_enabled(self, kind: ActionKind) -> bool:
        return self.capability_flags.get(kind, False)


class SafetySettings(BaseModel):
    enable_url_navigation: bool = False
    enable_clicking: bool = False
    enable_form_filling: bool = False
    max_navigation_actions_per_session: int = Field(50, ge=0)
    blocked_domains: list[str] = []
    allowed_domains: list[str] = []


class LoggingSettings(BaseModel):
    log_navigation_actions: bool = True


class BackendSettings(BaseModel):
    base_url: str = "http://localhost:3025"
    timeout_seconds: float = Field(30, gt=0)


class AppSettings(BaseModel):
    log_level: str = "INFO"
    log_path: str = "logs/navigation.log"


class NavigationConfig(BaseModel):
    navigation_abilities: StrictBool = False
    safety_settings: SafetySettings = SafetySettings()
    logging: LoggingSettings = LoggingSettings()
    backend: BackendSettings = BackendSettings()
    app: AppSettings = AppSettings()

    def to_policy(self) -> PolicyConfig:
        safety = self.safety_settings
        return PolicyConfig(
            navigation_enabled=self.navigation_abilities,
            capability_flags={
                ActionKind.NAVIGATE_TO_URL: safety.enable_url_navigation,
                ActionKind.CLICK_ELEMENT: safety.enable_clicking,
                ActionKind.FILL_FORM: safety.enable_form_filling,
            },
            blocked_domain_patterns=tuple(safety.blocked_domains),
            allowed_domain_patterns=tuple(safety.allowed_domains),
            max_actions_per_session=safety.max_navigation_actions_per_session,
            log_actions=self.logging.log_navigation_actions,
        )


class ConfigService:
    def __init__(
        self,
        default_path: Path = Path("config/navigation-config.yaml"),
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.default_path = default_path
        self.logger = logger
        self.config = NavigationConfig()
        self.last_loaded: Optional[Path] = None
        self.last_error: Optional[str] = None

    def load(self, path: Optional[Path] = None) -> NavigationConfig:
        path = path or self.default_path
        if not path.exists():
            raise FileNotFoundError(f"Config not found: {path}")

        with path.open("r", encoding="utf-8") as fh:
            try:
                data = yaml.safe_load(fh) or {}
            except yaml.YAMLError as exc:
                raise ValueError(f"Config parse error: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError(f"Config root must be a mapping, got {type(data).__name__}")
        bad_keys = [key for key in data if not isinstance(key, str)]
        if bad_keys:
            raise ValueError(f"Config keys must be strings, got {bad_keys!r}")

        try:
            self.config = NavigationConfig.model_validate(data)
            self.last_loaded = path
            return self.config
        except ValidationError as exc:
            raise ValueError(f"Config validation error: {exc}") from exc

    def load_policy(self, path: Optional[Path] = None) -> PolicyConfig:
        """Load the policy, collapsing any failure to the all-rejecting policy."""

        try:
            return self.load(path).to_policy()
        except (OSError, ValueError, TypeError) as exc:
            self.config = NavigationConfig()
            self.last_error = str(exc)
            if self.logger:
                self.logger.warning("Navigation config unavailable, navigation disabled: %s", exc)
            return PolicyConfig.disabled()

    def active_config_name(self) -> str:
        return self.last_loaded.name if self.last_loaded else self.default_path.name
