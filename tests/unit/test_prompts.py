"""Unit tests for prompt construction."""

from src.agent.prompts import build_messages, get_system_prompt


class TestSystemPrompt:
    def test_contains_company_and_context(self):
        prompt = get_system_prompt("[Source: a.txt]\nHoliday text", company_name="Acme")

        assert "assistant for Acme company" in prompt
        assert "[Source: a.txt]\nHoliday text" in prompt
        assert "don't know" in prompt
        assert "Sources:" in prompt

    def test_without_sources_instruction(self):
        prompt = get_system_prompt("ctx", with_sources=False)

        assert "Sources:" not in prompt
        assert "Amsterdam Standard" in prompt


class TestBuildMessages:
    def test_order(self):
        history = [
            {"role": "user", "content": "q1"},
            {"role": "assistant", "content": "a1"},
        ]

        messages = build_messages("q2", "ctx", history=history)

        assert [m["role"] for m in messages] == ["system", "user", "assistant", "user"]
        assert messages[-1] == {"role": "user", "content": "q2"}

    def test_history_system_messages_dropped(self):
        history = [{"role": "system", "content": "ignore me"}, {"role": "user", "content": "q1"}]

        messages = build_messages("q2", "ctx", history=history)

        assert [m["content"] for m in messages[1:]] == ["q1", "q2"]

    def test_without_history(self):
        messages = build_messages("q", "ctx")

        assert len(messages) == 2
        assert "ctx" in messages[0]["content"]
