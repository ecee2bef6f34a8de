"""Unit tests for per-session conversation history."""

import threading

import pytest

from src.agent.history import ConversationHistory


class TestConversationHistory:
    """Bounded, isolated message lists per session."""

    def test_add_exchange(self):
        history = ConversationHistory()

        history.add_exchange("s1", "What are the holidays?", "26 days.")

        assert history.get("s1") == [
            {"role": "user", "content": "What are the holidays?"},
            {"role": "assistant", "content": "26 days."},
        ]

    def test_keeps_last_ten_messages(self):
        history = ConversationHistory()

        for i in range(8):
            history.add_exchange("s1", f"q{i}", f"a{i}")

        messages = history.get("s1")
        assert len(messages) == 10
        assert messages[0] == {"role": "user", "content": "q3"}
        assert messages[-1] == {"role": "assistant", "content": "a7"}

    def test_sessions_are_isolated(self):
        history = ConversationHistory()

        history.add_exchange("s1", "q", "a")

        assert history.get("s2") == []
        assert "s1" in history
        assert "s2" not in history
        assert history.sessions() == ["s1"]

    def test_get_returns_copy(self):
        history = ConversationHistory()
        history.append("s1", "user", "hello")

        history.get("s1")[0]["content"] = "changed"
        history.get("s1").append({"role": "user", "content": "extra"})

        assert history.get("s1") == [{"role": "user", "content": "hello"}]

    def test_clear(self):
        history = ConversationHistory()
        history.append("s1", "user", "hello")

        assert history.clear("s1") is True
        assert history.clear("s1") is False
        assert len(history) == 0

    def test_custom_limit(self):
        history = ConversationHistory(max_messages=3)

        for i in range(5):
            history.append("s1", "user", str(i))

        assert [m["content"] for m in history.get("s1")] == ["2", "3", "4"]

    def test_invalid_limit(self):
        with pytest.raises(ValueError):
            ConversationHistory(max_messages=0)

    def test_concurrent_appends_stay_bounded(self):
        history = ConversationHistory()

        def worker(n):
            for i in range(50):
                history.append("shared", "user", f"{n}-{i}")

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(history.get("shared")) == 10

    def test_concurrent_exchanges_keep_pairs_together(self):
        history = ConversationHistory()

        def worker(n):
            for i in range(200):
                history.add_exchange("shared", f"q{n}-{i}", f"a{n}-{i}")

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        messages = history.get("shared")
        assert len(messages) == 10
        for question, answer in zip(messages[::2], messages[1::2]):
            assert question["role"] == "user"
            assert answer["role"] == "assistant"
            assert answer["content"] == "a" + question["content"][1:]
