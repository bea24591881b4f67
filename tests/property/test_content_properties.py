"""
Property-based tests for content fitting and name normalization.

Tests invariants for:
- truncate never exceeding its limit
- ContentFitter output always fitting, whatever the condenser returns
- Section name normalization
"""

from unittest.mock import MagicMock

from hypothesis import given
from hypothesis import strategies as st

from procsync.application.sync.content import TRUNCATION_MARKER, ContentFitter, truncate
from procsync.application.sync.sections import normalize_section_name
from procsync.core.domain.enums import Stage
from procsync.core.exceptions import CondensationError


# =============================================================================
# truncate Properties
# =============================================================================


class TestTruncateProperties:
    """Property tests for truncate."""

    @given(st.text(), st.integers(min_value=1, max_value=5000))
    def test_never_exceeds_limit(self, text, limit):
        assert len(truncate(text, limit)) <= limit

    @given(st.text(max_size=200), st.integers(min_value=200, max_value=5000))
    def test_short_text_unchanged(self, text, limit):
        assert truncate(text, limit) == text

    @given(st.text(min_size=1), st.integers(min_value=1, max_value=5000))
    def test_result_is_prefix_or_marked(self, text, limit):
        result = truncate(text, limit)
        assert text.startswith(result) or result.endswith(TRUNCATION_MARKER)


# =============================================================================
# ContentFitter Properties
# =============================================================================


class TestContentFitterProperties:
    """Property tests for ContentFitter.fit."""

    @given(st.text(), st.integers(min_value=1, max_value=2000))
    def test_fit_without_condenser(self, text, limit):
        fitted = ContentFitter(limit=limit).fit(text)
        assert len(fitted.text) <= limit

    @given(st.text(min_size=1), st.text(), st.integers(min_value=1, max_value=500))
    def test_fit_with_any_condenser_output(self, text, condensed, limit):
        condenser = MagicMock()
        condenser.condense.return_value = condensed

        fitted = ContentFitter(condenser, limit=limit).fit(text)

        assert len(fitted.text) <= limit
        assert not (fitted.condensed and fitted.truncated)

    @given(st.text(min_size=1), st.integers(min_value=1, max_value=500))
    def test_fit_when_condenser_fails(self, text, limit):
        condenser = MagicMock()
        condenser.condense.side_effect = CondensationError("down")

        fitted = ContentFitter(condenser, limit=limit).fit(text)

        assert len(fitted.text) <= limit
        assert fitted.condensed is False

    @given(st.text(), st.integers(min_value=1, max_value=2000))
    def test_changed_text_is_flagged_truncated(self, text, limit):
        fitted = ContentFitter(limit=limit).fit(text)
        assert fitted.truncated == (fitted.text != text)


# =============================================================================
# Section Name Properties
# =============================================================================


class TestSectionNameProperties:
    """Property tests for normalize_section_name."""

    @given(st.text(alphabet=st.characters(max_codepoint=127)))
    def test_idempotent(self, name):
        once = normalize_section_name(name)
        assert normalize_section_name(once) == once

    @given(st.sampled_from(Stage.ordered()), st.sampled_from(["", " ", "  \t"]))
    def test_canonical_names_match_their_stage(self, stage, padding):
        name = f"{padding}{stage.section_name.upper()}{padding}"
        assert normalize_section_name(name) == stage.value
