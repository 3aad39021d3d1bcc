"""Unit tests for the session module."""
from datetime import datetime

import pytest
from hypothesis import given
from hypothesis import strategies as st

from palaver.config import DEFAULT_MODE_PROMPTS, AssistantConfig
from palaver.llm import ProtocolError, TransportError
from palaver.prompts import clear_cache, load_prompt
from palaver.session import (
    PromptTable,
    SessionController,
    append_reply,
    resolve_system_prompt,
    with_mode_suffix,
)
from palaver.transcript import Message, Role, decode


@pytest.fixture
def controller_factory(fake_client_factory, fixed_now):
    """Build a controller around a fake client with a fixed clock."""
    def _make(replies=None, error=None, config=None):
        client = fake_client_factory(replies=replies, error=error)
        controller = SessionController(client=client, config=config, clock=lambda: fixed_now)
        return controller, client
    return _make


class TestPromptTable:
    """Tests for mode to prompt resolution."""

    def test_mapped_mode(self):
        """Test that a mapped mode resolves to its prompt."""
        table = PromptTable()
        assert table.resolve_prompt_id("python-mode") == "programming"
        assert table.resolve_system_prompt("python-mode") == load_prompt("programming")

    def test_no_mode_uses_default(self):
        """Test that a missing mode resolves to the default prompt."""
        assert PromptTable().resolve_system_prompt(None) == load_prompt("default")

    @given(st.text().filter(lambda mode: mode not in DEFAULT_MODE_PROMPTS))
    def test_unmapped_mode_falls_back(self, mode: str):
        """Property test: unmapped modes resolve to the default prompt."""
        assert resolve_system_prompt(mode) == load_prompt("default")

    def test_configured_prompt_text(self):
        """Test that configured prompt texts win over packaged ones."""
        config = AssistantConfig(
            mode_prompts={"haskell-mode": "functional"},
            prompts={"functional": "Think in types.", "default": "Be terse."},
        )
        table = PromptTable(config)

        assert table.resolve_system_prompt("haskell-mode") == "Think in types."
        assert table.resolve_system_prompt("python-mode") == "Be terse."

    def test_unknown_prompt_id_falls_back(self):
        """Test that a mode mapped to a missing prompt uses the default text."""
        config = AssistantConfig(mode_prompts={"odd-mode": "does-not-exist"})
        assert PromptTable(config).resolve_system_prompt("odd-mode") == load_prompt("default")

    def test_missing_default_prompt_falls_back_to_package(self):
        """Test that a misconfigured default prompt id still resolves."""
        config = AssistantConfig(default_prompt="nowhere")
        assert PromptTable(config).resolve_system_prompt("odd-mode") == load_prompt("default")

    def test_mode_suffix(self):
        """Test that the mode is named after the prompt."""
        assert with_mode_suffix("Be terse.", "org-mode") == (
            "Be terse.\n\nThe user is currently working in org-mode."
        )
        assert with_mode_suffix("Be terse.", None) == "Be terse."


class TestAppendReply:
    """Tests for the text appended after a reply."""

    @pytest.mark.parametrize("text,padding", [
        ("", ""),
        ("Hello\n\n", ""),
        ("Hello\n", "\n"),
        ("Hello", "\n\n"),
    ])
    def test_padding(self, text: str, padding: str, fixed_now: datetime):
        """Test that the assistant separator always starts after a blank line."""
        appended = append_reply(text, "Hi!", fixed_now)
        assert appended == (
            f"{padding}---[2024-01-01 12:30:45] assistant:\n\nHi!\n\n"
            "---[2024-01-01 12:30:45] user:\n\n"
        )


class TestStartSession:
    """Tests for starting a conversation."""

    def test_builds_transcript(self, controller_factory):
        """Test the full transcript after a successful first turn."""
        controller, client = controller_factory(replies=["Hi there."])

        transcript = controller.start_session("Hello", mode="org-mode")

        assert transcript == (
            "---[2024-01-01 12:30:45] system:\n\n"
            f"{load_prompt('writing')}\n\nThe user is currently working in org-mode.\n\n"
            "---[2024-01-01 12:30:45] user:\n\nHello\n\n"
            "---[2024-01-01 12:30:45] assistant:\n\nHi there.\n\n"
            "---[2024-01-01 12:30:45] user:\n\n"
        )
        assert client.calls == [[
            Message(role=Role.SYSTEM, content=controller.system_prompt("org-mode")),
            Message(role=Role.USER, content="Hello"),
        ]]

    def test_selected_text_joins_user_message(self, controller_factory):
        """Test that the selection is sent after the prompt in the user message."""
        controller, client = controller_factory(replies=["Done."])

        controller.start_session("Explain this:", selected_text="\ndef f(): pass\n", mode="python-mode")

        assert client.calls[0][1] == Message(role=Role.USER, content="Explain this:\n\ndef f(): pass")

    def test_no_reply_returns_request_only(self, controller_factory):
        """Test that a failed first turn adds no assistant section."""
        controller, client = controller_factory(error=TransportError("refused"))

        transcript = controller.start_session("Hello")

        assert [m.role for m in decode(transcript)] == [Role.SYSTEM, Role.USER]
        assert "assistant:" not in transcript
        assert len(client.calls) == 1

    @pytest.mark.parametrize("reply", ["", "   \n "])
    def test_empty_reply_adds_no_assistant_section(self, controller_factory, reply):
        """Test that an empty first reply leaves only the request sections."""
        controller, client = controller_factory(replies=[reply])

        transcript = controller.start_session("Hello")

        assert [m.role for m in decode(transcript)] == [Role.SYSTEM, Role.USER]
        assert client.reports[-1][0] == "error"


class TestContinueSession:
    """Tests for continuing a conversation."""

    def test_sends_full_history(self, controller_factory, sample_transcript):
        """Test that every message is sent and the reply is appended."""
        controller, client = controller_factory(replies=["Hi."])

        appended = controller.continue_session(sample_transcript)

        assert client.calls == [[
            Message(role=Role.SYSTEM, content="Be terse."),
            Message(role=Role.USER, content="Hello"),
        ]]
        assert appended == (
            "\n\n---[2024-01-01 12:30:45] assistant:\n\nHi.\n\n"
            "---[2024-01-01 12:30:45] user:\n\n"
        )
        assert [m.role for m in decode(sample_transcript + appended)] == [
            Role.SYSTEM, Role.USER, Role.ASSISTANT, Role.USER
        ]

    def test_multi_turn(self, controller_factory):
        """Test that each turn sees everything written by previous turns."""
        controller, client = controller_factory(replies=["One.", "Two."])

        transcript = controller.start_session("First")
        transcript += "Second"
        transcript += controller.continue_session(transcript)

        assert [m.content for m in client.calls[1]] == [
            controller.system_prompt(None), "First", "One.", "Second"
        ]
        assert decode(transcript)[-2] == Message(role=Role.ASSISTANT, content="Two.")

    def test_text_without_separators(self, controller_factory):
        """Test that unstructured text sends nothing."""
        controller, client = controller_factory(replies=["unused"])

        assert controller.continue_session("just some notes") is None
        assert client.calls == []

    @pytest.mark.parametrize("error", [TransportError("timed out"), ProtocolError("HTTP 500", 500)])
    def test_failure_leaves_transcript_unchanged(self, controller_factory, sample_transcript, error):
        """Test that a failed request appends nothing."""
        controller, client = controller_factory(error=error)

        assert controller.continue_session(sample_transcript) is None
        assert len(client.calls) == 1
        assert client.reports[-1][0] == "error"

    @pytest.mark.parametrize("reply", ["", "   \n "])
    def test_empty_reply_appends_nothing(self, controller_factory, sample_transcript, reply):
        """Test that an empty reply does not produce a blank assistant section."""
        controller, client = controller_factory(replies=[reply])

        assert controller.continue_session(sample_transcript) is None
        assert len(client.calls) == 1


class TestOneShotFlows:
    """Tests for replace_region and insert."""

    def test_replace_region(self, controller_factory):
        """Test the combined query and the verbatim reply."""
        controller, client = controller_factory(replies=["def g(): pass"])

        reply = controller.replace_region("Rename f to g", "def f(): pass", mode="python-mode")

        assert reply == "def g(): pass"
        [messages] = client.calls
        assert len(messages) == 1
        assert messages[0].role is Role.USER
        assert messages[0].content == (
            f"{controller.system_prompt('python-mode')}\n\nRename f to g\n\n"
            "Replace the following:\n\ndef f(): pass"
        )

    def test_insert_with_selection(self, controller_factory):
        """Test that insert frames the selection as user input."""
        controller, client = controller_factory(replies=["A haiku."])

        assert controller.insert("Write a haiku about", "autumn") == "A haiku."
        content = client.calls[0][0].content
        assert content.endswith("Write a haiku about\n\nUser input:\n\nautumn")
        assert "Replace the following" not in content

    def test_insert_without_selection(self, controller_factory):
        """Test that insert omits the input block without a selection."""
        controller, client = controller_factory(replies=["Text."])

        controller.insert("Write a haiku")

        assert client.calls[0][0].content == f"{controller.system_prompt(None)}\n\nWrite a haiku"

    def test_empty_reply_is_no_replacement(self, controller_factory):
        """Test that an empty one-shot reply is treated as no reply."""
        controller, _ = controller_factory(replies=["  ", ""])

        assert controller.replace_region("Fix", "teh") is None
        assert controller.insert("Fix") is None

    def test_one_shot_failure(self, controller_factory):
        """Test that one-shot flows return None without a reply."""
        controller, _ = controller_factory(error=TransportError("refused"))

        assert controller.replace_region("Fix", "teh") is None
        assert controller.insert("Fix") is None


class TestGenerateTitle:
    """Tests for transcript titling."""

    def test_skips_system_block(self, controller_factory, sample_transcript):
        """Test that the system section is not sent."""
        controller, client = controller_factory(replies=["greeting-chat"])

        assert controller.generate_title(sample_transcript) == "greeting-chat"

        [messages] = client.calls
        assert messages[0] == Message(role=Role.SYSTEM, content=load_prompt("title"))
        assert messages[1].role is Role.USER
        assert messages[1].content == "---[2024-01-01 00:00:01] user:\n\nHello"

    def test_excerpt_is_bounded(self, controller_factory):
        """Test that at most the configured number of characters is sent."""
        controller, client = controller_factory(
            replies=["long-chat"],
            config=AssistantConfig(title_excerpt_chars=50),
        )

        controller.generate_title("---[t] user:\n\n" + "x" * 500)

        assert len(client.calls[0][1].content) <= 50

    def test_default_excerpt_size(self, controller_factory):
        """Test the default bound of 1200 characters."""
        controller, client = controller_factory(replies=["long-chat"])

        controller.generate_title("y" * 5000)

        assert client.calls[0][1].content == "y" * 1200

    def test_empty_content(self, controller_factory):
        """Test that nothing is sent for an empty transcript."""
        controller, client = controller_factory(replies=["unused"])

        assert controller.generate_title("---[t] system:\n\nBe terse.\n") is None
        assert client.calls == []


class TestPromptFiles:
    """Tests for prompt file loading."""

    def test_packaged_prompts_exist(self):
        """Test that every built-in prompt identifier has a packaged file."""
        for prompt_id in {"default", "title", *DEFAULT_MODE_PROMPTS.values()}:
            assert load_prompt(prompt_id)

    def test_override_directory(self, tmp_path, monkeypatch):
        """Test that PALAVER_PROMPTS_DIR takes precedence over packaged prompts."""
        (tmp_path / "default.txt").write_text("  Custom default.\n", encoding="utf-8")
        monkeypatch.setenv("PALAVER_PROMPTS_DIR", str(tmp_path))
        clear_cache()
        try:
            assert load_prompt("default") == "Custom default."
        finally:
            monkeypatch.delenv("PALAVER_PROMPTS_DIR")
            clear_cache()

    def test_missing_prompt(self):
        """Test that an unknown prompt raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError, match="not-a-prompt"):
            load_prompt("not-a-prompt")
