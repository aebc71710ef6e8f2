"""Tests for LLM prompt formatting and response parsing edge cases."""

from polysub.llm.prompts import (
    format_history_context,
    format_json_segments,
    parse_json_array_response,
    parse_numbered_response,
)


def test_parse_extra_lines_truncated():
    response = "1. A\n2. B\n3. C\n4. D"
    result, exact = parse_numbered_response(response, 2)
    assert result == ["A", "B"]
    assert exact is False


def test_parse_fewer_lines_padded():
    response = "1. Only one"
    result, exact = parse_numbered_response(response, 3)
    assert result == ["Only one", "", ""]
    assert exact is False


def test_parse_blank_lines_ignored():
    response = "1. Hello\n\n2. World\n\n"
    result, exact = parse_numbered_response(response, 2)
    assert result == ["Hello", "World"]
    assert exact is True


def test_format_history_context_empty():
    assert format_history_context([], []) == ""


def test_format_history_context_pairs():
    result = format_history_context(["Bonjour"], ["Hello"])
    assert "Bonjour → Hello" in result
    assert "Previous translations" in result


def test_format_json_segments_keeps_unicode():
    assert format_json_segments(["Ça va ?", "⟦IO_0⟧oui⟦IC_1⟧"]) == '["Ça va ?", "⟦IO_0⟧oui⟦IC_1⟧"]'


class TestParseJsonArrayResponse:
    def test_bare_array(self):
        assert parse_json_array_response('["A", "B"]', 2) == (["A", "B"], True)

    def test_code_fenced_array(self):
        response = '```json\n["A", "B"]\n```'
        assert parse_json_array_response(response, 2) == (["A", "B"], True)

    def test_wrapped_object(self):
        response = '{"result": {"note": 1}, "lines": ["A"]}'
        assert parse_json_array_response(response, 1) == (["A"], True)

    def test_object_with_single_list(self):
        assert parse_json_array_response('{"output": ["A", "B"]}', 2) == (["A", "B"], True)

    def test_array_embedded_in_prose(self):
        response = 'Here are the translations: ["A", "B"] Hope this helps!'
        assert parse_json_array_response(response, 2) == (["A", "B"], True)

    def test_delimiter_fallback(self):
        assert parse_json_array_response("A ||| B", 2) == (["A", "B"], True)

    def test_numbered_fallback_is_never_exact(self):
        assert parse_json_array_response("1. A\n2. B", 2) == (["A", "B"], False)

    def test_long_response_truncated(self):
        assert parse_json_array_response('["A", "B", "C"]', 2) == (["A", "B"], False)

    def test_short_response_padded(self):
        assert parse_json_array_response('["A"]', 3) == (["A", "", ""], False)

    def test_null_and_numbers_coerced(self):
        assert parse_json_array_response("[null, 3]", 2) == (["", "3"], True)
