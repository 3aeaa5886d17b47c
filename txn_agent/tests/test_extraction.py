"""Tests for JSON extraction from LLM completions."""

import pytest

from txn_agent.errors import ParseError
from txn_agent.extraction import extract_rule_text, parse_rule_json

RULE = '{"conditions": {"all": [{"fact": "amt", "operator": "lessThan", "value": 10}]}}'


class TestExtractRuleText:
    """Test the result tags → code fences → brace block chain."""

    def test_bare_json(self):
        assert extract_rule_text(RULE) == RULE

    def test_result_tags(self):
        raw = f"Here you go:\n<result>\n{RULE}\n</result>\nDone."
        assert extract_rule_text(raw) == RULE

    def test_closing_tag_only(self):
        """Prompt ends with an open tag, completion only closes it."""
        assert extract_rule_text(f"{RULE}\n</result>") == RULE

    def test_code_fence(self):
        raw = f"```json\n{RULE}\n```"
        assert extract_rule_text(raw) == RULE

    def test_fence_inside_tags(self):
        raw = f"<result>```json\n{RULE}\n```</result>"
        assert extract_rule_text(raw) == RULE

    def test_unterminated_fence(self):
        assert extract_rule_text(f"```json\n{RULE}") == RULE

    def test_prose_around_object(self):
        raw = f"Sure! The rule is {RULE} hope that helps."
        assert extract_rule_text(raw) == RULE

    def test_braces_inside_strings(self):
        raw = 'prefix {"message": "use {curly} braces", "n": 1} suffix'
        assert extract_rule_text(raw) == '{"message": "use {curly} braces", "n": 1}'

    def test_no_object(self):
        with pytest.raises(ParseError) as exc:
            extract_rule_text("I cannot help with that.")
        assert exc.value.raw_response == "I cannot help with that."

    def test_empty(self):
        with pytest.raises(ParseError):
            extract_rule_text("")

    def test_unbalanced(self):
        with pytest.raises(ParseError):
            extract_rule_text('{"conditions": {"all": [')


class TestParseRuleJson:
    """Test decoding of the isolated text."""

    def test_decodes(self):
        assert parse_rule_json(f"<result>{RULE}</result>")["conditions"]["all"][0]["fact"] == "amt"

    def test_invalid_json(self):
        with pytest.raises(ParseError) as exc:
            parse_rule_json("{conditions: all}")
        assert "Failed to parse JSON from LLM response" in exc.value.message
