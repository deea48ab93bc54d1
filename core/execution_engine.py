from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from automation.forwarder import ActionForwarder
from core.actions import ActionKind, ActionResult
from core.policy_guard import PolicyDecision, PolicyGuard

ENABLE_FLAGS = ("enable_url_navigation", "enable_clicking", "enable_form_filling")


class ExecutionEngine:
    """Executes approved actions against the automation backend."""

    def __init__(self, *, policy_guard: PolicyGuard, forwarder: ActionForwarder) -> None:
        self.policy_guard = policy_guard
        self.forwarder = forwarder

    def execute(
        self, kind: ActionKind | str, parameters: Optional[Mapping[str, Any]] = None
    ) -> Union[ActionResult, PolicyDecision]:
        parameters = parameters or {}
        decision = self.policy_guard.authorize(kind, parameters)
        if not decision.allowed:
            return decision

        kind = ActionKind(kind)
        if kind is ActionKind.CHECK_STATUS:
            return ActionResult.ok(self.policy_guard.status_snapshot())
        if kind is ActionKind.ENABLE_REQUEST:
            # Runtime enabling is never honoured; the caller only gets the flags echoed back.
            return ActionResult.ok({flag: bool(parameters.get(flag, False)) for flag in ENABLE_FLAGS})
        # Quota already consumed by authorize() is kept even if the call fails.
        return self.forwarder.invoke(kind, parameters)
