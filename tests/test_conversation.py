"""Tests for the conversation log."""

import pytest

from agentloop.agent import Conversation, Message, Role, ToolInvocationRequest


def test_append_preserves_order():
    conversation = Conversation()
    conversation.append(Message.system("sys"))
    conversation.append(Message.user("hi"))
    conversation.append(Message.assistant("hello"))

    assert [m.role for m in conversation.snapshot()] == [Role.SYSTEM, Role.USER, Role.ASSISTANT]
    assert conversation.last.content == "hello"
    assert len(conversation) == 3


def test_system_message_must_come_first():
    conversation = Conversation()
    conversation.append(Message.user("hi"))

    with pytest.raises(ValueError):
        conversation.append(Message.system("late"))
    assert len(conversation) == 1


def test_snapshot_is_immutable_copy():
    conversation = Conversation()
    conversation.append(Message.user("hi"))

    snapshot = conversation.snapshot()
    conversation.append(Message.user("again"))

    assert isinstance(snapshot, tuple)
    assert len(snapshot) == 1
    with pytest.raises(AttributeError):
        snapshot[0].content = "changed"


def test_openai_format_for_tool_round():
    request = ToolInvocationRequest("call_1", "fetch", '{"url": "https://example.com"}')
    conversation = Conversation()
    conversation.append(Message.user("fetch it"))
    conversation.append(Message.assistant("", (request,)))
    conversation.append(Message.tool("page text", "call_1"))

    assert conversation.to_openai_messages() == [
        {"role": "user", "content": "fetch it"},
        {
            "role": "assistant",
            "content": None,
            "tool_calls": [{
                "id": "call_1",
                "type": "function",
                "function": {"name": "fetch", "arguments": '{"url": "https://example.com"}'},
            }],
        },
        {"role": "tool", "content": "page text", "tool_call_id": "call_1"},
    ]


def test_assistant_text_is_kept_alongside_tool_calls():
    message = Message.assistant("Let me check.", (ToolInvocationRequest("c", "t"),))
    assert message.to_openai_message()["content"] == "Let me check."
