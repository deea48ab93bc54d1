from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from core.actions import DEFAULT_WAIT_TIMEOUT_MS, ActionKind, ActionResult
from core.logger import ActionLogRecord, log_action_record, redact_parameters
from core.state import SessionState

from .http_client import AutomationHttpClient, BackendError


@dataclass(frozen=True)
class Endpoint:
    path: str
    fields: Tuple[str, ...]
    defaults: Tuple[Tuple[str, Any], ...] = ()

    def build_payload(self, parameters: Mapping[str, Any]) -> Dict[str, Any]:
        payload = dict(self.defaults)
        for name in self.fields:
            if parameters.get(name) is not None:
                payload[name] = parameters[name]
        return payload


ENDPOINTS: Dict[ActionKind, Endpoint] = {
    ActionKind.NAVIGATE_TO_URL: Endpoint("/navigate", ("url",)),
    ActionKind.CLICK_ELEMENT: Endpoint("/click", ("selector",)),
    ActionKind.FILL_FORM: Endpoint("/fill-form", ("selector", "value")),
    ActionKind.SCROLL_TO: Endpoint("/scroll", ("x", "y")),
    ActionKind.WAIT_FOR_ELEMENT: Endpoint(
        "/wait-for-element", ("selector", "timeout"), defaults=(("timeout", DEFAULT_WAIT_TIMEOUT_MS),)
    ),
}


class ActionForwarder:
    """Sends authorized actions to the automation backend and normalizes the outcome.

    Every attempt produces one :class:`ActionLogRecord` (when ``log_actions`` is on),
    whether the backend call succeeded or not. Failures are returned, never raised.
    """

    def __init__(
        self,
        http_client: AutomationHttpClient,
        *,
        session: SessionState | None = None,
        log_actions: bool = True,
        logger=None,
        record_sink: Optional[Callable[[ActionLogRecord], None]] = None,
    ) -> None:
        self.http_client = http_client
        self.session = session or SessionState()
        self.log_actions = log_actions
        self.logger = logger
        self.record_sink = record_sink

    def invoke(self, kind: ActionKind | str, parameters: Optional[Mapping[str, Any]] = None) -> ActionResult:
        kind = ActionKind(kind)
        parameters = parameters or {}
        endpoint = ENDPOINTS.get(kind)
        if endpoint is None:
            return ActionResult.failure(f"No backend endpoint for {kind.value}")

        payload = endpoint.build_payload(parameters)
        try:
            response = self.http_client.post_json(endpoint.path, payload)
        except BackendError as exc:
            result = ActionResult.failure(str(exc))
        else:
            if response.ok:
                result = ActionResult.ok(response.body, status_code=response.status_code)
            else:
                result = ActionResult.failure(
                    f"Backend returned HTTP {response.status_code} for {endpoint.path}",
                    status_code=response.status_code,
                    payload=response.body,
                )

        self._emit(kind, payload, result.succeeded)
        return result

    def _emit(self, kind: ActionKind, payload: Mapping[str, Any], succeeded: bool) -> None:
        if not self.log_actions:
            return
        record = ActionLogRecord(
            action=kind.value,
            parameters=redact_parameters(payload),
            succeeded=succeeded,
            session_actions_used=self.session.actions_used,
        )
        if self.record_sink:
            self.record_sink(record)
        elif self.logger:
            log_action_record(self.logger, record)
