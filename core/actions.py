from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple


class ActionKind(str, Enum):
    NAVIGATE_TO_URL = "navigate_to_url"
    CLICK_ELEMENT = "click_element"
    FILL_FORM = "fill_form"
    SCROLL_TO = "scroll_to"
    WAIT_FOR_ELEMENT = "wait_for_element"
    CHECK_STATUS = "check_status"
    ENABLE_REQUEST = "enable_request"

    @property
    def is_informational(self) -> bool:
        return self in INFORMATIONAL_KINDS


INFORMATIONAL_KINDS = frozenset({ActionKind.CHECK_STATUS, ActionKind.ENABLE_REQUEST})

REQUIRED_PARAMETERS: Dict[ActionKind, Tuple[str, ...]] = {
    ActionKind.NAVIGATE_TO_URL: ("url",),
    ActionKind.CLICK_ELEMENT: ("selector",),
    ActionKind.FILL_FORM: ("selector", "value"),
    ActionKind.SCROLL_TO: ("x", "y"),
    ActionKind.WAIT_FOR_ELEMENT: ("selector",),
    ActionKind.CHECK_STATUS: (),
    ActionKind.ENABLE_REQUEST: (),
}

DEFAULT_WAIT_TIMEOUT_MS = 5000


def missing_parameters(kind: ActionKind, parameters: Mapping[str, Any]) -> list[str]:
    return [name for name in REQUIRED_PARAMETERS[kind] if parameters.get(name) is None]


@dataclass(frozen=True)
class ActionRequest:
    kind: ActionKind
    parameters: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def build(cls, kind: ActionKind | str, parameters: Optional[Mapping[str, Any]] = None) -> "ActionRequest":
        return cls(kind=ActionKind(kind), parameters=dict(parameters or {}))


@dataclass
class ActionResult:
    """Outcome of a forwarded action; ``payload`` is passed through from the backend untouched."""

    succeeded: bool
    payload: Any = None
    error: str | None = None
    status_code: int | None = None

    @classmethod
    def ok(cls, payload: Any, status_code: int | None = None) -> "ActionResult":
        return cls(succeeded=True, payload=payload, status_code=status_code)

    @classmethod
    def failure(cls, error: str, status_code: int | None = None, payload: Any = None) -> "ActionResult":
        return cls(succeeded=False, payload=payload, error=error, status_code=status_code)
