"""
Unit tests for model reply normalization.
"""

from types import SimpleNamespace

from services.openai.response_parser import (
    extract_text,
    extract_usage,
    parse_turn_response,
    strip_code_fences,
)


class TestParseTurnResponse:
    """Test parsing the model's JSON reply."""

    def test_valid_reply(self):
        reply = parse_turn_response(
            '{"say": "Wow!", "tool": {"name": "highlightObject", "arguments": {"label": "dog"}}, '
            '"endConversation": false}'
        )

        assert reply.say == "Wow!"
        assert reply.tool.name == "highlightObject"
        assert reply.tool.arguments == {"label": "dog"}
        assert reply.end_conversation is False

    def test_code_fences_removed(self):
        reply = parse_turn_response('```json\n{"say": "Hi there!", "tool": null}\n```')

        assert reply.say == "Hi there!"
        assert reply.tool is None

    def test_plain_text_degrades_to_speech(self):
        reply = parse_turn_response("I see a red balloon!")

        assert reply.say == "I see a red balloon!"
        assert reply.tool is None
        assert reply.end_conversation is False

    def test_missing_say_degrades(self):
        raw = '{"tool": null, "endConversation": true}'

        reply = parse_turn_response(raw)

        assert reply.say == raw
        assert reply.end_conversation is False

    def test_non_string_say_degrades(self):
        reply = parse_turn_response('{"say": 42}')

        assert reply.say == '{"say": 42}'

    def test_tool_without_name_dropped(self):
        reply = parse_turn_response('{"say": "Yay!", "tool": {"arguments": {}}}')

        assert reply.tool is None

    def test_missing_arguments_default_empty(self):
        reply = parse_turn_response('{"say": "Yay!", "tool": {"name": "addRewardStar"}}')

        assert reply.tool.arguments == {}

    def test_null_end_conversation_is_false(self):
        reply = parse_turn_response('{"say": "Bye!", "endConversation": null}')

        assert reply.end_conversation is False


class TestHelpers:
    def test_strip_plain_fence(self):
        assert strip_code_fences("```\n{}\n```") == "{}"

    def test_extract_text_from_output_items(self):
        response = SimpleNamespace(
            output=[
                SimpleNamespace(type="reasoning", content=None),
                SimpleNamespace(type="message", content=[SimpleNamespace(type="output_text", text="hello")]),
            ]
        )

        assert extract_text(response) == "hello"

    def test_extract_text_fallback(self):
        assert extract_text(SimpleNamespace(output=None, output_text="hi")) == "hi"

    def test_extract_usage_missing(self):
        assert extract_usage(SimpleNamespace()) == {"input_tokens": None, "output_tokens": None}


class TestEndConversationCoercion:
    """Test a usable say survives an odd endConversation value."""

    def test_non_boolean_keeps_say(self):
        reply = parse_turn_response('{"say": "Great job!", "tool": null, "endConversation": "soon"}')

        assert reply.say == "Great job!"
        assert reply.end_conversation is False

    def test_string_true_ends(self):
        reply = parse_turn_response('{"say": "Bye bye!", "endConversation": "true"}')

        assert reply.end_conversation is True

    def test_number_does_not_end(self):
        reply = parse_turn_response('{"say": "Bye bye!", "endConversation": 1}')

        assert reply.say == "Bye bye!"
        assert reply.end_conversation is False

    def test_blank_say_degrades(self):
        raw = '{"say": "   ", "tool": null}'

        reply = parse_turn_response(raw)

        assert reply.say == raw
