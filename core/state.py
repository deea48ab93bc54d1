import threading


class SessionState:
    """Per-process action accounting. Counters are never persisted."""

    def __init__(self) -> None:
        self.actions_used: int = 0
        self.lock = threading.Lock()

    def record_action(self) -> int:
        # Caller must hold ``lock`` so the quota check and the increment stay one step.
        self.actions_used += 1
        return self.actions_used

    def reset(self) -> None:
        with self.lock:
            self.actions_used = 0
