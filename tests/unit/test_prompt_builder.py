"""Unit tests for concept cleaning and prompt compilation."""

import pytest

from pfpgen.core.errors import InvalidInputError
from pfpgen.core.prompt_builder import build_prompt, clean_concept


class TestCleanConcept:
    """Tests for clean_concept()."""

    def test_trims_whitespace(self):
        """Leading and trailing whitespace is removed."""
        assert clean_concept("  pirate captain \n") == "pirate captain"

    @pytest.mark.parametrize("value", ["", "   ", "\n\t "])
    def test_empty_concept_rejected(self, value):
        """Empty or whitespace-only concepts raise InvalidInputError."""
        with pytest.raises(InvalidInputError):
            clean_concept(value)

    def test_missing_concept_rejected(self):
        """None is treated as a missing concept."""
        with pytest.raises(InvalidInputError, match="required"):
            clean_concept(None)

    @pytest.mark.parametrize("value", [42, ["a"], {"concept": "x"}])
    def test_non_string_rejected(self, value):
        """Non-string values raise InvalidInputError."""
        with pytest.raises(InvalidInputError, match="string"):
            clean_concept(value)

    def test_truncates_to_max_length(self):
        """Concepts longer than max_length are cut."""
        assert clean_concept("a" * 300, max_length=200) == "a" * 200

    def test_truncation_happens_after_trimming(self):
        """Surrounding whitespace does not count toward the limit."""
        assert clean_concept("   abcdef   ", max_length=6) == "abcdef"

    def test_truncation_strips_dangling_space(self):
        """A cut landing on a space does not leave trailing whitespace."""
        assert clean_concept("abc def", max_length=4) == "abc"

    def test_error_status_is_400(self):
        """Invalid input maps to HTTP 400."""
        with pytest.raises(InvalidInputError) as exc_info:
            clean_concept("")
        assert exc_info.value.status_code == 400
        assert exc_info.value.code == "invalid_input"


class TestBuildPrompt:
    """Tests for build_prompt()."""

    def test_concept_is_quoted(self):
        """The concept appears quoted in the prompt."""
        prompt = build_prompt("neon samurai")
        assert 'User Input Concept: "neon samurai"' in prompt

    def test_deterministic(self):
        """The same concept always yields the same prompt."""
        assert build_prompt("wizard") == build_prompt("wizard")

    def test_different_concepts_differ(self):
        """Only the concept section varies between prompts."""
        a = build_prompt("wizard")
        b = build_prompt("astronaut")
        assert a != b
        assert a.replace("wizard", "astronaut") == b

    def test_style_constraints_included(self):
        """The fixed style constraints are always present."""
        prompt = build_prompt("chef")
        assert "bust-up character portrait" in prompt
        assert "aqua & magenta lighting" in prompt
        assert "Return ONLY a PNG image." in prompt

    def test_reference_variant_uses_identity_anchor(self):
        """With a reference image the identity-anchor preamble is used."""
        prompt = build_prompt("chef", with_reference=True)
        assert "IDENTITY ANCHOR" in prompt

    def test_text_only_variant_has_no_identity_anchor(self):
        """Without a reference image the attached-image instructions are omitted."""
        prompt = build_prompt("chef", with_reference=False)
        assert "IDENTITY ANCHOR" not in prompt
        assert "same recurring mascot" in prompt

    def test_sections_separated_by_blank_lines(self):
        """Preamble, concept and style constraints are separate sections."""
        sections = build_prompt("chef").split("\n\n")
        assert len(sections) == 3
        assert sections[1] == 'User Input Concept: "chef"'
