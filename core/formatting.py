from __future__ import annotations

from typing import Any, Mapping

from core.actions import ActionKind, ActionResult
from core.policy_guard import PolicyDecision, RejectionReason, StatusSnapshot


def _on_off(flag: bool) -> str:
    return "ENABLED" if flag else "DISABLED"


def _backend_success(payload: Any) -> Any:
    if isinstance(payload, Mapping):
        return payload.get("success", True)
    return True


def format_rejection(tool_name: str, decision: PolicyDecision) -> str:
    if decision.reason is RejectionReason.NAVIGATION_DISABLED:
        return "Navigation is disabled. Please enable navigation_abilities in the config file."
    reason = decision.reason.value if decision.reason else "rejected"
    detail = f" {decision.detail}" if decision.detail else ""
    return f"Action {tool_name} rejected ({reason}).{detail}"


def format_failure(tool_name: str, result: ActionResult) -> str:
    return f"Error executing {tool_name}: {result.error or 'unknown error'}"


def format_status(snapshot: StatusSnapshot) -> str:
    flags = snapshot.capability_flags
    blocked = ", ".join(snapshot.blocked_domain_patterns) or "None"
    allowed = ", ".join(snapshot.allowed_domain_patterns) or "Any"
    return "\n".join(
        [
            "Navigation Status:",
            f"- Navigation Abilities: {_on_off(snapshot.enabled)}",
            f"- URL Navigation: {_on_off(flags.get(ActionKind.NAVIGATE_TO_URL, False))}",
            f"- Element Clicking: {_on_off(flags.get(ActionKind.CLICK_ELEMENT, False))}",
            f"- Form Filling: {_on_off(flags.get(ActionKind.FILL_FORM, False))}",
            f"- Actions Used This Session: {snapshot.actions_used}",
            f"- Max Actions Per Session: {snapshot.max_actions_per_session}",
            f"- Blocked Domains: {blocked}",
            f"- Allowed Domains: {allowed}",
        ]
    )


def format_enable_instructions(requested: Mapping[str, bool]) -> str:
    lines = [
        "To enable navigation abilities, please manually edit the navigation config file and set:",
        "- navigation_abilities: true",
    ]
    lines.extend(f"- {flag}: {str(bool(value)).lower()}" for flag, value in requested.items())
    lines.append("")
    lines.append("This manual step is required for security reasons.")
    return "\n".join(lines)


def format_success(kind: ActionKind, parameters: Mapping[str, Any], result: ActionResult) -> str:
    if kind is ActionKind.CHECK_STATUS:
        return format_status(result.payload)
    if kind is ActionKind.ENABLE_REQUEST:
        return format_enable_instructions(result.payload)

    success = _backend_success(result.payload)
    if kind is ActionKind.NAVIGATE_TO_URL:
        return f"Successfully navigated to {parameters.get('url')}. Page loaded: {success}"
    if kind is ActionKind.CLICK_ELEMENT:
        return f"Clicked element: {parameters.get('selector')}. Success: {success}"
    if kind is ActionKind.FILL_FORM:
        return f"Filled form field: {parameters.get('selector')}. Success: {success}"
    if kind is ActionKind.SCROLL_TO:
        return f"Scrolled to position ({parameters.get('x')}, {parameters.get('y')}). Success: {success}"
    return f"Waited for element: {parameters.get('selector')}. Found: {success}"
