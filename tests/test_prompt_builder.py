from carbon_lens.analysis.constants import HumanFootprint
from carbon_lens.prompts.prompt_builder import build_prompt_text


class TestBuildPromptText:
    def test_contains_json_structure(self):
        prompt = build_prompt_text()
        assert '"objects": [' in prompt
        assert '"analysis_metadata": {' in prompt
        assert '"trees_required": number' in prompt

    def test_contains_lifetime_rule(self):
        prompt = build_prompt_text()
        assert "Lifetime total must equal: manufacturing + (daily_operation * 365 * lifespan)" in prompt

    def test_human_values_quoted(self):
        prompt = build_prompt_text()
        assert "Lifetime total: 400000 kg CO2" in prompt
        assert "Daily operation: 15 kg CO2" in prompt
        assert "Lifespan: 73 years" in prompt
        assert '"Global standardized"' in prompt
        assert '"Global standardized human values"' in prompt

    def test_custom_human_values(self):
        prompt = build_prompt_text(human=HumanFootprint(lifetime_total_kg_co2=123456))
        assert "Lifetime total: 123456 kg CO2" in prompt

    def test_max_objects_optional(self):
        assert "at most" not in build_prompt_text()
        assert "Report at most 5 objects" in build_prompt_text(max_objects=5)

    def test_image_quality_hint(self):
        assert "Image quality assessed" not in build_prompt_text()
        assert "Image quality assessed before upload: poor" in build_prompt_text(image_quality_hint="poor")

    def test_asks_for_json_only(self):
        prompt = build_prompt_text()
        assert prompt.rstrip().endswith("Return only valid JSON, no additional text")

    def test_deterministic(self):
        assert build_prompt_text() == build_prompt_text()
