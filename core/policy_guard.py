from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple
from urllib.parse import urlsplit

from core.actions import ActionKind, missing_parameters
from core.config_service import GATED_KINDS, PolicyConfig
from core.state import SessionState


class RejectionReason(str, Enum):
    NAVIGATION_DISABLED = "navigation disabled"
    QUOTA_EXCEEDED = "session quota exceeded"
    CAPABILITY_DISABLED = "capability disabled"
    DOMAIN_BLOCKED = "domain blocked"
    DOMAIN_NOT_ALLOWED = "domain not in allow-list"
    INVALID_URL = "invalid url"
    MISSING_PARAMETER = "missing parameter"
    UNKNOWN_ACTION = "unknown action"


@dataclass(frozen=True)
class PolicyDecision:
    allowed: bool
    reason: Optional[RejectionReason] = None
    detail: str = ""

    @classmethod
    def authorized(cls) -> "PolicyDecision":
        return cls(allowed=True)

    @classmethod
    def rejected(cls, reason: RejectionReason, detail: str = "") -> "PolicyDecision":
        return cls(allowed=False, reason=reason, detail=detail)

    def __bool__(self) -> bool:
        return self.allowed


@dataclass(frozen=True)
class StatusSnapshot:
    enabled: bool
    capability_flags: Dict[ActionKind, bool]
    actions_used: int
    max_actions_per_session: int
    blocked_domain_patterns: Tuple[str, ...]
    allowed_domain_patterns: Tuple[str, ...]


def compile_wildcard(pattern: str) -> re.Pattern[str]:
    """Compile ``*`` as "any sequence"; everything else matches literally."""

    return re.compile(".*".join(re.escape(part) for part in pattern.split("*")))


def check_domain(
    hostname: str,
    blocked_patterns: Sequence[str],
    allowed_patterns: Sequence[str],
) -> Optional[RejectionReason]:
    """Return the rejection reason for ``hostname`` or ``None`` when it may be visited."""

    for blocked in blocked_patterns:
        if "*" in blocked:
            if compile_wildcard(blocked).fullmatch(hostname):
                return RejectionReason.DOMAIN_BLOCKED
        elif blocked in hostname:
            return RejectionReason.DOMAIN_BLOCKED

    if allowed_patterns and not any(allowed in hostname for allowed in allowed_patterns):
        return RejectionReason.DOMAIN_NOT_ALLOWED
    return None


def extract_hostname(url: Any) -> Optional[str]:
    if not isinstance(url, str):
        return None
    try:
        parts = urlsplit(url.strip())
        hostname = parts.hostname
    except ValueError:
        return None
    if not parts.scheme or not hostname:
        return None
    return hostname


class PolicyGuard:
    """Applies safety checks before browser actions are forwarded.

    The guard is the only writer of ``SessionState.actions_used``. Each call to
    :meth:`authorize` runs under the session lock so the quota check and the
    increment happen as one step.
    """

    def __init__(self, config: PolicyConfig, *, session: SessionState | None = None) -> None:
        self.config = config
        self.session = session or SessionState()

    def authorize(self, kind: ActionKind | str, parameters: Optional[Mapping[str, Any]] = None) -> PolicyDecision:
        try:
            kind = ActionKind(kind)
        except ValueError:
            return PolicyDecision.rejected(RejectionReason.UNKNOWN_ACTION, f"Unknown action: {kind}")
        parameters = parameters or {}

        if kind.is_informational:
            return PolicyDecision.authorized()

        with self.session.lock:
            decision = self._evaluate(kind, parameters)
            if decision.allowed:
                self.session.record_action()
            return decision

    def _evaluate(self, kind: ActionKind, parameters: Mapping[str, Any]) -> PolicyDecision:
        config = self.config
        if not config.navigation_enabled:
            return PolicyDecision.rejected(
                RejectionReason.NAVIGATION_DISABLED,
                "Navigation abilities are disabled. Set navigation_abilities: true in config.",
            )

        if self.session.actions_used >= config.max_actions_per_session:
            return PolicyDecision.rejected(
                RejectionReason.QUOTA_EXCEEDED,
                "Maximum navigation actions exceeded for this session.",
            )

        # scroll_to and wait_for_element are gated only by the master switch and quota.
        if kind in GATED_KINDS and not config.capability_enabled(kind):
            return PolicyDecision.rejected(
                RejectionReason.CAPABILITY_DISABLED,
                f"{kind.value} is disabled in safety settings.",
            )

        missing = missing_parameters(kind, parameters)
        if missing:
            return PolicyDecision.rejected(
                RejectionReason.MISSING_PARAMETER,
                f"Missing required parameter(s): {', '.join(missing)}",
            )

        if kind is ActionKind.NAVIGATE_TO_URL:
            return self._check_url(parameters["url"])
        return PolicyDecision.authorized()

    def _check_url(self, url: Any) -> PolicyDecision:
        hostname = extract_hostname(url)
        if hostname is None:
            return PolicyDecision.rejected(RejectionReason.INVALID_URL, f"Invalid URL: {url}")
        reason = check_domain(
            hostname,
            self.config.blocked_domain_patterns,
            self.config.allowed_domain_patterns,
        )
        if reason is not None:
            return PolicyDecision.rejected(reason, f"Domain not allowed: {hostname}")
        return PolicyDecision.authorized()

    def is_domain_allowed(self, url: str) -> bool:
        return self._check_url(url).allowed

    def status_snapshot(self) -> StatusSnapshot:
        config = self.config
        return StatusSnapshot(
            enabled=config.navigation_enabled,
            capability_flags={kind: config.capability_enabled(kind) for kind in GATED_KINDS},
            actions_used=self.session.actions_used,
            max_actions_per_session=config.max_actions_per_session,
            blocked_domain_patterns=tuple(config.blocked_domain_patterns),
            allowed_domain_patterns=tuple(config.allowed_domain_patterns),
        )
