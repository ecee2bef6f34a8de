"""
Active Session Registry

Tracks the session ids that have asked at least one question since startup.
"""

import secrets
import string
import threading
import time
from typing import Dict, List

_BASE36 = string.digits + string.ascii_lowercase


def generate_session_id() -> str:
    """Build an id like session_1718000000000_k3j9x2a."""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(7))
    return f"session_{int(time.time() * 1000)}_{suffix}"


class SessionRegistry:
    """Insertion-ordered, thread-safe set of session ids."""

    def __init__(self):
        self.lock = threading.Lock()
        self._sessions: Dict[str, None] = {}

    def add(self, session_id: str):
        with self.lock:
            self._sessions[session_id] = None

    def remove(self, session_id: str) -> bool:
        with self.lock:
            if session_id in self._sessions:
                del self._sessions[session_id]
                return True
            return False

    def list(self) -> List[str]:
        with self.lock:
            return list(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        with self.lock:
            return session_id in self._sessions

    def __len__(self) -> int:
        with self.lock:
            return len(self._sessions)
