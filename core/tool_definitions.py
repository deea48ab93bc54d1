from __future__ import annotations

from typing import Any, Dict, List

from core.actions import DEFAULT_WAIT_TIMEOUT_MS, ActionKind


def _schema(properties: Dict[str, Dict[str, Any]], required: List[str] | None = None) -> Dict[str, Any]:
    schema: Dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


TOOL_KINDS: Dict[str, ActionKind] = {
    "mcp_navigateToUrl": ActionKind.NAVIGATE_TO_URL,
    "mcp_clickElement": ActionKind.CLICK_ELEMENT,
    "mcp_fillForm": ActionKind.FILL_FORM,
    "mcp_scrollTo": ActionKind.SCROLL_TO,
    "mcp_waitForElement": ActionKind.WAIT_FOR_ELEMENT,
    "mcp_checkNavigationStatus": ActionKind.CHECK_STATUS,
    "mcp_enableNavigation": ActionKind.ENABLE_REQUEST,
}

NAVIGATION_TOOLS: List[Dict[str, Any]] = [
    {
        "name": "mcp_navigateToUrl",
        "description": "Navigate to a specific URL",
        "inputSchema": _schema({"url": {"type": "string", "description": "The URL to navigate to"}}, ["url"]),
    },
    {
        "name": "mcp_clickElement",
        "description": "Click on an element using CSS selector",
        "inputSchema": _schema(
            {"selector": {"type": "string", "description": "CSS selector for the element to click"}},
            ["selector"],
        ),
    },
    {
        "name": "mcp_fillForm",
        "description": "Fill a form field with a value",
        "inputSchema": _schema(
            {
                "selector": {"type": "string", "description": "CSS selector for the form field"},
                "value": {"type": "string", "description": "Value to fill in the form field"},
            },
            ["selector", "value"],
        ),
    },
    {
        "name": "mcp_scrollTo",
        "description": "Scroll to a specific position on the page",
        "inputSchema": _schema(
            {
                "x": {"type": "number", "description": "X coordinate to scroll to"},
                "y": {"type": "number", "description": "Y coordinate to scroll to"},
            },
            ["x", "y"],
        ),
    },
    {
        "name": "mcp_waitForElement",
        "description": "Wait for an element to appear on the page",
        "inputSchema": _schema(
            {
                "selector": {"type": "string", "description": "CSS selector for the element to wait for"},
                "timeout": {
                    "type": "number",
                    "description": f"Timeout in milliseconds (default: {DEFAULT_WAIT_TIMEOUT_MS})",
                    "default": DEFAULT_WAIT_TIMEOUT_MS,
                },
            },
            ["selector"],
        ),
    },
    {
        "name": "mcp_checkNavigationStatus",
        "description": "Check if navigation abilities are enabled and current limits",
        "inputSchema": _schema({}),
    },
    {
        "name": "mcp_enableNavigation",
        "description": "Enable navigation abilities (requires manual config change)",
        "inputSchema": _schema(
            {
                "enable_url_navigation": {"type": "boolean", "description": "Enable URL navigation"},
                "enable_clicking": {"type": "boolean", "description": "Enable element clicking"},
                "enable_form_filling": {"type": "boolean", "description": "Enable form filling"},
            }
        ),
    },
]
