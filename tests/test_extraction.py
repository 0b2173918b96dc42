import pytest

from carbon_lens.analysis.errors import ParseError, ResponseFormatError
from carbon_lens.analysis.extraction import extract_json_object


class TestExtractJsonObject:
    def test_clean_json(self):
        assert extract_json_object('{"objects": []}') == {"objects": []}

    def test_wrapped_in_prose(self):
        raw = 'Here is the result: {"objects": [], "analysis_metadata": {}} Thanks!'
        assert extract_json_object(raw) == {"objects": [], "analysis_metadata": {}}

    def test_markdown_code_fence(self):
        raw = '```json\n{"a": {"b": 1}}\n```'
        assert extract_json_object(raw) == {"a": {"b": 1}}

    def test_braces_inside_strings(self):
        assert extract_json_object('{"note": "uses } and {"}') == {"note": "uses } and {"}

    def test_stray_brace_after_body_falls_back_to_scan(self):
        raw = 'Result: {"a": 1} and a stray } here'
        assert extract_json_object(raw) == {"a": 1}

    def test_garbage_text_raises(self):
        with pytest.raises(ParseError, match="Invalid response format"):
            extract_json_object("I could not analyze this image, sorry.")

    def test_unbalanced_object_raises(self):
        with pytest.raises(ParseError):
            extract_json_object('{"objects": [')

    def test_top_level_list_raises(self):
        with pytest.raises(ParseError):
            extract_json_object("[1, 2, 3]")

    def test_none_input(self):
        with pytest.raises(ParseError):
            extract_json_object(None)

    def test_parse_error_is_format_error(self):
        with pytest.raises(ResponseFormatError):
            extract_json_object("")

    @pytest.mark.parametrize(
        "raw",
        ["[" * 200000, "{" * 200000, '{"objects": ' + "[" * 200000, '{"a": ' * 50000],
    )
    def test_runaway_nesting_is_parse_error(self, raw):
        with pytest.raises(ParseError):
            extract_json_object(raw)

    def test_deep_nesting_after_valid_object(self):
        raw = 'Result: {"a": 1} then ' + "{" * 200000 + "}"
        assert extract_json_object(raw) == {"a": 1}
