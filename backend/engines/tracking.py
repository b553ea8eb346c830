"""Session Result Tracking

Folds a finished session's exercise results back into vocabulary statistics.
The store owns persistence; this module is the reference for what it must
write: one update per result (not per word), then the session counter moves
forward by exactly one.
"""
from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Literal

from core.logging import engine_logger
from core.errors import AppError, Ok, Result, out_of_range, unknown_reference
from engines.exercises import Exercise, ExerciseType, calculate_session_difficulty
from engines.scoring import VocabularyEntry

log = engine_logger()

PerformanceBand = Literal['excellent', 'great', 'good', 'keep_practicing']

# Accuracy percentage thresholds, best first
PERFORMANCE_BANDS: tuple[tuple[float, PerformanceBand], ...] = (
    (90, 'excellent'),
    (75, 'great'),
    (60, 'good'),
)


@dataclass(frozen=True, slots=True)
class ExerciseResult:
    """Outcome of one exercise as reported by the UI."""
    exercise_type: ExerciseType
    lemma: str
    is_correct: bool
    time_spent_ms: int = 0


@dataclass(frozen=True, slots=True)
class SessionUpdate:
    """Statistics after applying a session's results."""
    session_index: int
    entries: tuple[VocabularyEntry, ...]
    updated_lemmas: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class SessionSummary:
    correct: int
    total: int
    accuracy_pct: float
    average_time_ms: float
    difficulty: float | None
    performance: PerformanceBand

    def to_dict(self) -> dict:
        return {
            'correct': self.correct,
            'total': self.total,
            'accuracyPct': self.accuracy_pct,
            'averageTimeMs': self.average_time_ms,
            'difficulty': self.difficulty,
            'performance': self.performance,
        }


@dataclass(frozen=True, slots=True)
class VocabularyStats:
    total_words: int
    average_accuracy: float
    average_seen_count: float

    def to_dict(self) -> dict:
        return {
            'totalWords': self.total_words,
            'averageAccuracy': self.average_accuracy,
            'averageSeenCount': self.average_seen_count,
        }


def apply_session_results(
    vocabulary: Sequence[VocabularyEntry],
    results: Sequence[ExerciseResult],
    current_session_index: int,
) -> Result[SessionUpdate, AppError]:
    """Apply each result once and advance the session counter.

    Every result increments ``times_seen``, increments ``times_correct`` when
    correct, and stamps the word with the new session index. A word drilled
    by two exercises is updated twice.

    Returns:
        Ok(SessionUpdate) with entries in snapshot order
        Err(AppError) if a result names a lemma missing from the snapshot
    """
    origin = "tracking.apply"
    if current_session_index < 0:
        return out_of_range("current_session_index", current_session_index, min_val=0, origin=origin)

    by_lemma = {entry.lemma: entry for entry in vocabulary}
    new_index = current_session_index + 1
    updated: list[str] = []

    for result in results:
        entry = by_lemma.get(result.lemma)
        if entry is None:
            log.warning("result_for_unknown_lemma", lemma=result.lemma)
            return unknown_reference("lemma", result.lemma, origin=origin)

        by_lemma[result.lemma] = replace(
            entry,
            times_seen=entry.times_seen + 1,
            times_correct=entry.times_correct + (1 if result.is_correct else 0),
            last_practiced_session_index=new_index,
        )
        if result.lemma not in updated:
            updated.append(result.lemma)

    entries = tuple(by_lemma[entry.lemma] for entry in vocabulary)
    log.debug("results_applied", results=len(results), words=len(updated), session_index=new_index)
    return Ok(SessionUpdate(session_index=new_index, entries=entries, updated_lemmas=tuple(updated)))


def performance_band(accuracy_pct: float) -> PerformanceBand:
    for threshold, band in PERFORMANCE_BANDS:
        if accuracy_pct >= threshold:
            return band
    return 'keep_practicing'


def summarize_session(
    results: Sequence[ExerciseResult],
    exercises: Sequence[Exercise] | None = None,
) -> SessionSummary:
    """Score a finished session; difficulty is only reported when exercises are given."""
    total = len(results)
    correct = sum(1 for r in results if r.is_correct)
    accuracy_pct = (correct / total) * 100 if total else 0.0
    average_time = sum(r.time_spent_ms for r in results) / total if total else 0.0

    return SessionSummary(
        correct=correct,
        total=total,
        accuracy_pct=round(accuracy_pct, 1),
        average_time_ms=round(average_time, 1),
        difficulty=calculate_session_difficulty(exercises) if exercises is not None else None,
        performance=performance_band(accuracy_pct),
    )


def vocabulary_stats(vocabulary: Sequence[VocabularyEntry]) -> VocabularyStats:
    """Learner-wide averages: accuracy is average correct over average seen."""
    total = len(vocabulary)
    if not total:
        return VocabularyStats(total_words=0, average_accuracy=0.0, average_seen_count=0.0)

    avg_seen = sum(e.times_seen for e in vocabulary) / total
    avg_correct = sum(e.times_correct for e in vocabulary) / total
    return VocabularyStats(
        total_words=total,
        average_accuracy=avg_correct / avg_seen if avg_seen > 0 else 0.0,
        average_seen_count=avg_seen,
    )
