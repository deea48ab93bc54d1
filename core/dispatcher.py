from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from core.actions import ActionRequest, ActionResult
from core.execution_engine import ExecutionEngine
from core.formatting import format_failure, format_rejection, format_success
from core.policy_guard import PolicyDecision
from core.tool_definitions import NAVIGATION_TOOLS, TOOL_KINDS


class NavigationToolDispatcher:
    """Turns tool calls into engine executions and always answers with text."""

    def __init__(self, engine: ExecutionEngine, *, logger=None) -> None:
        self.engine = engine
        self.logger = logger

    @staticmethod
    def tools() -> List[Dict[str, Any]]:
        return [dict(tool) for tool in NAVIGATION_TOOLS]

    @staticmethod
    def handles(name: str) -> bool:
        return name in TOOL_KINDS

    def handle(self, name: str, args: Optional[Mapping[str, Any]] = None) -> str:
        kind = TOOL_KINDS.get(name)
        if kind is None:
            return f"Unknown navigation tool: {name}"
        if args is not None and not isinstance(args, Mapping):
            return f"Error executing {name}: arguments must be an object"
        request = ActionRequest.build(kind, args)
        parameters = request.parameters
        try:
            outcome = self.engine.execute(request.kind, parameters)
        except Exception as exc:  # noqa: BLE001
            if self.logger:
                self.logger.exception("Navigation tool %s crashed", name)
            return f"Error executing {name}: {exc}"

        if isinstance(outcome, PolicyDecision):
            if self.logger:
                self.logger.info("Navigation tool %s rejected: %s", name, outcome.reason.value if outcome.reason else "")
            return format_rejection(name, outcome)
        if isinstance(outcome, ActionResult) and not outcome.succeeded:
            return format_failure(name, outcome)
        return format_success(kind, parameters, outcome)
