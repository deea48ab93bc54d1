import unittest
from unittest.mock import MagicMock

from automation.forwarder import ActionForwarder
from core.actions import ActionKind, ActionResult
from core.config_service import PolicyConfig
from core.dispatcher import NavigationToolDispatcher
from core.execution_engine import ExecutionEngine
from core.policy_guard import PolicyDecision, PolicyGuard, RejectionReason
from core.tool_definitions import NAVIGATION_TOOLS, TOOL_KINDS


def make_policy(**overrides) -> PolicyConfig:
    values = {
        "navigation_enabled": True,
        "capability_flags": {ActionKind.NAVIGATE_TO_URL: True, ActionKind.CLICK_ELEMENT: True},
        "blocked_domain_patterns": ("*.bank.com",),
        "max_actions_per_session": 3,
    }
    values.update(overrides)
    return PolicyConfig(**values)


class ExecutionEngineTests(unittest.TestCase):
    def setUp(self) -> None:
        self.guard = PolicyGuard(make_policy())
        self.forwarder = MagicMock(spec=ActionForwarder)
        self.forwarder.invoke.return_value = ActionResult.ok({"success": True}, status_code=200)
        self.engine = ExecutionEngine(policy_guard=self.guard, forwarder=self.forwarder)

    def test_rejection_never_reaches_forwarder(self) -> None:
        outcome = self.engine.execute(ActionKind.NAVIGATE_TO_URL, {"url": "https://login.bank.com"})
        self.assertIsInstance(outcome, PolicyDecision)
        self.assertEqual(outcome.reason, RejectionReason.DOMAIN_BLOCKED)
        self.forwarder.invoke.assert_not_called()

    def test_approved_action_is_forwarded(self) -> None:
        outcome = self.engine.execute("click_element", {"selector": "#go"})
        self.assertTrue(outcome.succeeded)
        self.forwarder.invoke.assert_called_once_with(ActionKind.CLICK_ELEMENT, {"selector": "#go"})
        self.assertEqual(self.guard.session.actions_used, 1)

    def test_transport_failure_keeps_consumed_quota(self) -> None:
        self.forwarder.invoke.return_value = ActionResult.failure("connection refused")
        outcome = self.engine.execute(ActionKind.SCROLL_TO, {"x": 0, "y": 10})
        self.assertFalse(outcome.succeeded)
        self.assertEqual(self.guard.session.actions_used, 1)

    def test_check_status_returns_snapshot_without_backend(self) -> None:
        outcome = self.engine.execute(ActionKind.CHECK_STATUS)
        self.assertTrue(outcome.succeeded)
        self.assertEqual(outcome.payload.max_actions_per_session, 3)
        self.forwarder.invoke.assert_not_called()
        self.assertEqual(self.guard.session.actions_used, 0)

    def test_enable_request_does_not_change_policy(self) -> None:
        outcome = self.engine.execute(ActionKind.ENABLE_REQUEST, {"enable_form_filling": True})
        self.assertEqual(
            outcome.payload,
            {"enable_url_navigation": False, "enable_clicking": False, "enable_form_filling": True},
        )
        self.assertFalse(self.guard.config.capability_enabled(ActionKind.FILL_FORM))


class NavigationToolDispatcherTests(unittest.TestCase):
    def setUp(self) -> None:
        self.guard = PolicyGuard(make_policy())
        self.forwarder = MagicMock(spec=ActionForwarder)
        self.forwarder.invoke.return_value = ActionResult.ok({"success": True}, status_code=200)
        self.logger = MagicMock()
        engine = ExecutionEngine(policy_guard=self.guard, forwarder=self.forwarder)
        self.dispatcher = NavigationToolDispatcher(engine, logger=self.logger)

    def test_tool_declarations_cover_every_tool(self) -> None:
        names = [tool["name"] for tool in NavigationToolDispatcher.tools()]
        self.assertEqual(names, [tool["name"] for tool in NAVIGATION_TOOLS])
        self.assertEqual(set(names), set(TOOL_KINDS))
        fill = next(tool for tool in NAVIGATION_TOOLS if tool["name"] == "mcp_fillForm")
        self.assertEqual(fill["inputSchema"]["required"], ["selector", "value"])

    def test_routing_is_exact_not_prefix(self) -> None:
        self.assertTrue(self.dispatcher.handles("mcp_clickElement"))
        self.assertFalse(self.dispatcher.handles("mcp_clickElementTwice"))
        self.assertEqual(self.dispatcher.handle("mcp_clickElementTwice", {}), "Unknown navigation tool: mcp_clickElementTwice")

    def test_navigate_success_text(self) -> None:
        text = self.dispatcher.handle("mcp_navigateToUrl", {"url": "https://docs.python.org"})
        self.assertEqual(text, "Successfully navigated to https://docs.python.org. Page loaded: True")

    def test_scroll_success_text(self) -> None:
        text = self.dispatcher.handle("mcp_scrollTo", {"x": 5, "y": 600})
        self.assertEqual(text, "Scrolled to position (5, 600). Success: True")

    def test_disabled_text(self) -> None:
        engine = ExecutionEngine(policy_guard=PolicyGuard(PolicyConfig.disabled()), forwarder=self.forwarder)
        text = NavigationToolDispatcher(engine).handle("mcp_clickElement", {"selector": "#a"})
        self.assertIn("Navigation is disabled", text)

    def test_rejection_text_names_reason(self) -> None:
        text = self.dispatcher.handle("mcp_fillForm", {"selector": "#a", "value": "x"})
        self.assertIn("capability disabled", text)
        self.assertIn("mcp_fillForm", text)

    def test_transport_failure_text(self) -> None:
        self.forwarder.invoke.return_value = ActionResult.failure("Request to /click failed: refused")
        text = self.dispatcher.handle("mcp_clickElement", {"selector": "#a"})
        self.assertEqual(text, "Error executing mcp_clickElement: Request to /click failed: refused")

    def test_non_object_arguments_are_rendered_not_raised(self) -> None:
        for bad_args in (["x"], "x=1", 42):
            text = self.dispatcher.handle("mcp_scrollTo", bad_args)
            self.assertEqual(text, "Error executing mcp_scrollTo: arguments must be an object")
        self.forwarder.invoke.assert_not_called()
        self.assertEqual(self.guard.session.actions_used, 0)

    def test_unexpected_exception_is_rendered(self) -> None:
        self.forwarder.invoke.side_effect = RuntimeError("boom")
        text = self.dispatcher.handle("mcp_waitForElement", {"selector": "#a"})
        self.assertEqual(text, "Error executing mcp_waitForElement: boom")
        self.logger.exception.assert_called_once()

    def test_status_text(self) -> None:
        self.dispatcher.handle("mcp_clickElement", {"selector": "#a"})
        text = self.dispatcher.handle("mcp_checkNavigationStatus", {})
        self.assertIn("- Navigation Abilities: ENABLED", text)
        self.assertIn("- Form Filling: DISABLED", text)
        self.assertIn("- Actions Used This Session: 1", text)
        self.assertIn("- Blocked Domains: *.bank.com", text)

    def test_enable_instructions_text(self) -> None:
        text = self.dispatcher.handle("mcp_enableNavigation", {"enable_clicking": True})
        self.assertIn("- navigation_abilities: true", text)
        self.assertIn("- enable_clicking: true", text)
        self.assertIn("- enable_form_filling: false", text)
        self.assertIn("required for security reasons", text)


if __name__ == "__main__":
    unittest.main()
