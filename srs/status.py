"""Status bucketing: learning / familiar / mastered, driven by review quality."""

from srs.word_types import WordStatus


def next_status(current: str, quality: int) -> str:
    """
    Status after a review of the given quality.

        quality >= 4: learning -> familiar, familiar/mastered -> mastered
        quality <= 2: back to learning
        quality == 3: unchanged
    """
    current = WordStatus(current).value
    if quality >= 4:
        if current == WordStatus.LEARNING.value:
            return WordStatus.FAMILIAR.value
        return WordStatus.MASTERED.value
    if quality <= 2:
        return WordStatus.LEARNING.value
    return current
