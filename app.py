from __future__ import annotations

import argparse
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from automation.forwarder import ActionForwarder
from automation.http_client import AutomationHttpClient
from core.config_service import ConfigService
from core.dispatcher import NavigationToolDispatcher
from core.execution_engine import ExecutionEngine
from core.logger import setup_logger
from core.policy_guard import PolicyGuard

CONFIG_ENV_VAR = "NAVGUARD_CONFIG"


class NavigationApp:
    def __init__(self, config_path: Optional[Path] = None) -> None:
        default_path = Path(os.environ.get(CONFIG_ENV_VAR, "config/navigation-config.yaml"))
        self.config_service = ConfigService(config_path or default_path)
        self.policy = self.config_service.load_policy()
        app_settings = self.config_service.config.app
        self.logger = setup_logger(app_settings)
        if self.config_service.last_error:
            self.logger.warning("Navigation disabled, config not loaded: %s", self.config_service.last_error)
        else:
            self.logger.info("Loaded navigation config %s", self.config_service.active_config_name())

        backend = self.config_service.config.backend
        self.http_client = AutomationHttpClient(
            base_url=backend.base_url,
            timeout=backend.timeout_seconds,
            logger=self.logger,
        )
        self.policy_guard = PolicyGuard(self.policy)
        self.forwarder = ActionForwarder(
            self.http_client,
            session=self.policy_guard.session,
            log_actions=self.policy.log_actions,
            logger=self.logger,
        )
        self.engine = ExecutionEngine(policy_guard=self.policy_guard, forwarder=self.forwarder)
        self.dispatcher = NavigationToolDispatcher(self.engine, logger=self.logger)

    def handle_tool(self, name: str, args: Optional[Dict[str, Any]] = None) -> str:
        return self.dispatcher.handle(name, args)

    def close(self) -> None:
        self.http_client.close()


def run(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Run one guarded browser navigation tool call.")
    parser.add_argument("tool", nargs="?", help="Tool name, e.g. mcp_navigateToUrl")
    parser.add_argument("--args", default="{}", help="Tool arguments as a JSON object")
    parser.add_argument("--config", type=Path, default=None, help="Path to the navigation config file")
    parser.add_argument("--list-tools", action="store_true", help="Print tool declarations as JSON")
    options = parser.parse_args(argv)

    if options.list_tools:
        print(json.dumps(NavigationToolDispatcher.tools(), indent=2))
        return
    if not options.tool:
        parser.error("tool is required unless --list-tools is given")
    try:
        tool_args = json.loads(options.args)
    except json.JSONDecodeError as exc:
        parser.error(f"--args is not valid JSON: {exc}")
    if not isinstance(tool_args, dict):
        parser.error("--args must be a JSON object")

    app = NavigationApp(options.config)
    try:
        print(app.handle_tool(options.tool, tool_args))
    finally:
        app.close()


if __name__ == "__main__":
    run()
