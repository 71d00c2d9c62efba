"""Tests for emotional-state normalization."""

from tradelog_app.data.emotions import (
    EMOTION_VOCABULARY,
    normalize_emotional_state,
    unknown_emotions,
)


class TestNormalizeEmotionalState:
    """Test both widget shapes normalize to one ordered list."""

    def test_list_kept_in_order(self):
        assert normalize_emotional_state(["TILT", "FOMO"]) == ["TILT", "FOMO"]

    def test_map_keeps_only_true_entries(self):
        result = normalize_emotional_state({"FOMO": True, "TILT": False, "PATIENCE": True})
        assert result == ["FOMO", "PATIENCE"]

    def test_map_values_filtered_by_truthiness(self):
        result = normalize_emotional_state({"FOMO": 1, "REGRET": True, "TILT": 0, "ANXIOUS": None})
        assert result == ["FOMO", "REGRET"]

    def test_duplicates_dropped(self):
        assert normalize_emotional_state(["FOMO", "FOMO", "NEUTRAL"]) == ["FOMO", "NEUTRAL"]

    def test_empty_inputs(self):
        assert normalize_emotional_state([]) == []
        assert normalize_emotional_state({}) == []
        assert normalize_emotional_state(None) == []

    def test_single_string(self):
        assert normalize_emotional_state("CONFIDENT") == ["CONFIDENT"]


class TestVocabulary:
    """Test vocabulary diagnostics."""

    def test_known_tags(self):
        assert unknown_emotions(list(EMOTION_VOCABULARY)) == []

    def test_unknown_tags_reported(self):
        assert unknown_emotions(["FOMO", "EUPHORIC"]) == ["EUPHORIC"]
