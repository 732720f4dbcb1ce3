"""
Tests for the scripted assistant
"""
from portal.services.chatbot import GREETING, RULES, Conversation, reply_to


def test_first_matching_rule_wins():
    """Rules are tried in order; the course rule precedes the grade rule"""
    assert reply_to("Which course grade do I need?") == RULES[0].response


def test_matching_is_case_insensitive():
    assert reply_to("LIBRARY hours?") == RULES[3].response


def test_fallback_echoes_input():
    answer = reply_to("parking permits")
    assert "parking permits" in answer


def test_conversation_transcript():
    conv = Conversation()
    assert conv.messages[0].text == GREETING
    bot = conv.ask("How do I submit my assignment?")
    assert bot.sender == "bot"
    assert [m.sender for m in conv.messages] == ["bot", "user", "bot"]
    assert [m.id for m in conv.messages] == [1, 2, 3]
    assert conv.messages[1].timestamp


def test_blank_input_is_ignored():
    conv = Conversation()
    assert conv.ask("   ") is None
    assert len(conv.messages) == 1
