"""Emotional-state normalization for the emotion picker widget."""

from collections.abc import Iterable, Mapping
from typing import Union

EMOTION_VOCABULARY = (
    "FOMO",
    "REVENGE",
    "TILT",
    "OVERRISK",
    "PATIENCE",
    "REGRET",
    "DISCIPLINE",
    "CONFIDENT",
    "ANXIOUS",
    "NEUTRAL",
)

EmotionInput = Union[Iterable[str], Mapping[str, bool]]


def normalize_emotional_state(emotions: EmotionInput) -> list[str]:
    """
    Normalize either widget shape to an ordered list of tags.

    A list is taken as-is (duplicates dropped, first occurrence kept); a
    tag→bool map keeps only the tags with a truthy value, in insertion order.
    """
    if emotions is None:
        return []

    if isinstance(emotions, Mapping):
        tags = [tag for tag, selected in emotions.items() if selected]
    elif isinstance(emotions, str):
        tags = [emotions]
    else:
        tags = list(emotions)

    seen: set[str] = set()
    result = []
    for tag in tags:
        if tag and tag not in seen:
            seen.add(tag)
            result.append(tag)
    return result


def unknown_emotions(tags: Iterable[str]) -> list[str]:
    """Tags outside the widget vocabulary, for diagnostics."""
    return [tag for tag in tags if tag.upper() not in EMOTION_VOCABULARY]
