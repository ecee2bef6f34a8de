"""
Conversation History

In-memory per-session message store. Each session keeps only its most
recent messages; nothing is persisted, restarting the process forgets
every conversation.
"""

import threading
from typing import Dict, List

DEFAULT_MAX_MESSAGES = 10


class ConversationHistory:
    def __init__(self, max_messages: int = DEFAULT_MAX_MESSAGES):
        """
        Initialize history store.

        Args:
            max_messages: Messages kept per session, oldest dropped first
        """
        if max_messages < 1:
            raise ValueError("max_messages must be at least 1")
        self.max_messages = max_messages
        self.lock = threading.Lock()
        self._messages: Dict[str, List[Dict[str, str]]] = {}

    def get(self, session_id: str) -> List[Dict[str, str]]:
        """Messages for a session, oldest first (a copy)."""
        with self.lock:
            return [dict(m) for m in self._messages.get(session_id, [])]

    def _extend(self, session_id: str, new_messages: List[Dict[str, str]]):
        # Caller holds self.lock
        messages = self._messages.setdefault(session_id, [])
        messages.extend(new_messages)
        if len(messages) > self.max_messages:
            del messages[:len(messages) - self.max_messages]

    def append(self, session_id: str, role: str, content: str):
        with self.lock:
            self._extend(session_id, [{"role": role, "content": content}])

    def add_exchange(self, session_id: str, question: str, answer: str):
        """Record a question and the assistant's answer as one step, so
        concurrent requests on a session never interleave their turns."""
        with self.lock:
            self._extend(session_id, [
                {"role": "user", "content": question},
                {"role": "assistant", "content": answer},
            ])

    def clear(self, session_id: str) -> bool:
        """Forget a session. Returns True if it existed."""
        with self.lock:
            return self._messages.pop(session_id, None) is not None

    def sessions(self) -> List[str]:
        with self.lock:
            return list(self._messages)

    def __contains__(self, session_id: str) -> bool:
        with self.lock:
            return session_id in self._messages

    def __len__(self) -> int:
        with self.lock:
            return len(self._messages)
