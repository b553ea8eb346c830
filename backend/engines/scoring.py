"""Word Priority Scoring

Composite priority for one vocabulary entry, combining three signals:
corpus frequency (importance), learner weakness (1 - accuracy) and recency
of practice (a step function over the practice gap).

Review intervals are fractions of the learner's vocabulary size, scaled by
``max(0.5, 1 - accuracy)``. Note the direction: the better a word is known,
the shorter its intervals.
"""
import math
from dataclasses import dataclass

# Composite weights: frequency first, then weakness, then timing
FREQUENCY_WEIGHT = 0.5
ACCURACY_WEIGHT = 0.3
SPACED_WEIGHT = 0.2

# Review intervals as fractions of vocabulary size
INTERVAL_IMMEDIATE = 0.05
INTERVAL_SHORT = 0.15
INTERVAL_MEDIUM = 0.35
INTERVAL_LONG = 0.60

# Spaced-repetition score for each band of the practice gap
SPACED_SCORE_NEVER_PRACTICED = 1.0
SPACED_SCORE_LONG = 1.0
SPACED_SCORE_MEDIUM = 0.8
SPACED_SCORE_SHORT = 0.6
SPACED_SCORE_IMMEDIATE = 0.4
SPACED_SCORE_RECENT = 0.1

MIN_ACCURACY_MULTIPLIER = 0.5
MAX_CORPUS_FREQUENCY = 100.0


@dataclass(frozen=True, slots=True)
class ScoringConfig:
    """Tunable scoring parameters. Defaults are the production constants."""
    frequency_weight: float = FREQUENCY_WEIGHT
    accuracy_weight: float = ACCURACY_WEIGHT
    spaced_weight: float = SPACED_WEIGHT
    interval_immediate: float = INTERVAL_IMMEDIATE
    interval_short: float = INTERVAL_SHORT
    interval_medium: float = INTERVAL_MEDIUM
    interval_long: float = INTERVAL_LONG

    def __post_init__(self):
        weights = (self.frequency_weight, self.accuracy_weight, self.spaced_weight)
        if any(w < 0 for w in weights):
            raise ValueError(f"scoring weights must be non-negative, got {weights}")
        if not math.isclose(sum(weights), 1.0, abs_tol=1e-9):
            raise ValueError(f"scoring weights must sum to 1.0, got {sum(weights)}")

        intervals = self.intervals
        if any(not 0 < f <= 1 for f in intervals):
            raise ValueError(f"interval fractions must be in (0, 1], got {intervals}")
        if list(intervals) != sorted(intervals):
            raise ValueError(f"interval fractions must be non-decreasing, got {intervals}")

    @property
    def intervals(self) -> tuple[float, float, float, float]:
        return (self.interval_immediate, self.interval_short, self.interval_medium, self.interval_long)

    @classmethod
    def from_settings(cls, settings) -> "ScoringConfig":
        return cls(
            frequency_weight=settings.SCORE_FREQUENCY_WEIGHT,
            accuracy_weight=settings.SCORE_ACCURACY_WEIGHT,
            spaced_weight=settings.SCORE_SPACED_WEIGHT,
            interval_immediate=settings.INTERVAL_IMMEDIATE,
            interval_short=settings.INTERVAL_SHORT,
            interval_medium=settings.INTERVAL_MEDIUM,
            interval_long=settings.INTERVAL_LONG,
        )

    def to_dict(self) -> dict:
        return {
            "weights": {
                "frequency": self.frequency_weight,
                "accuracy": self.accuracy_weight,
                "spaced": self.spaced_weight,
            },
            "intervals": {
                "immediate": self.interval_immediate,
                "short": self.interval_short,
                "medium": self.interval_medium,
                "long": self.interval_long,
            },
        }


DEFAULT_SCORING = ScoringConfig()


@dataclass(frozen=True, slots=True)
class VocabularyEntry:
    """Per-learner statistics for one lemma, as read from the store."""
    lemma: str
    surface_text: str
    pos_class: str
    corpus_frequency: float  # 0-100
    times_seen: int = 0
    times_correct: int = 0
    last_practiced_session_index: int | None = None  # None = never practiced

    @property
    def is_practiced(self) -> bool:
        return self.last_practiced_session_index is not None


@dataclass(frozen=True, slots=True)
class ScoredWord:
    """Vocabulary entry with its derived priority for one scheduling call."""
    lemma: str
    surface_text: str
    pos_class: str
    corpus_frequency: float
    accuracy: float
    practice_gap: int
    score: float

    def to_dict(self) -> dict:
        return {
            "lemma": self.lemma,
            "surfaceText": self.surface_text,
            "posClass": self.pos_class,
            "corpusFrequency": self.corpus_frequency,
            "accuracy": self.accuracy,
            "practiceGap": self.practice_gap,
            "score": self.score,
        }


def accuracy_of(entry: VocabularyEntry) -> float:
    """Share of correct answers; 0 for a word never seen."""
    return entry.times_correct / entry.times_seen if entry.times_seen > 0 else 0.0


def practice_gap(entry: VocabularyEntry, current_session_index: int, vocabulary_size: int) -> int:
    """Sessions since last practice; the vocabulary size for a word never practiced."""
    if entry.last_practiced_session_index is None:
        return vocabulary_size
    return current_session_index - entry.last_practiced_session_index


def review_intervals(
    vocabulary_size: int,
    accuracy: float,
    config: ScoringConfig = DEFAULT_SCORING,
) -> tuple[int, int, int, int]:
    """Immediate/short/medium/long intervals in sessions, scaled by ``max(0.5, 1 - accuracy)``."""
    multiplier = max(MIN_ACCURACY_MULTIPLIER, 1 - accuracy)
    return tuple(
        math.floor(math.floor(vocabulary_size * fraction) * multiplier)
        for fraction in config.intervals
    )


def spaced_repetition_score(
    entry: VocabularyEntry,
    current_session_index: int,
    vocabulary_size: int,
    config: ScoringConfig = DEFAULT_SCORING,
) -> float:
    """How overdue a word is, from 0.1 (just drilled) to 1.0 (never or long ago)."""
    if entry.last_practiced_session_index is None:
        return SPACED_SCORE_NEVER_PRACTICED

    gap = current_session_index - entry.last_practiced_session_index
    immediate, short, medium, long = review_intervals(vocabulary_size, accuracy_of(entry), config)

    if gap >= long:
        return SPACED_SCORE_LONG
    if gap >= medium:
        return SPACED_SCORE_MEDIUM
    if gap >= short:
        return SPACED_SCORE_SHORT
    if gap >= immediate:
        return SPACED_SCORE_IMMEDIATE
    return SPACED_SCORE_RECENT


def score_entry(
    entry: VocabularyEntry,
    current_session_index: int,
    vocabulary_size: int,
    config: ScoringConfig = DEFAULT_SCORING,
) -> float:
    """Composite priority in [0, 1]. Pure: identical inputs give identical output."""
    frequency_score = entry.corpus_frequency / MAX_CORPUS_FREQUENCY
    accuracy_score = 1 - accuracy_of(entry)
    spaced_score = spaced_repetition_score(entry, current_session_index, vocabulary_size, config)

    score = (
        frequency_score * config.frequency_weight
        + accuracy_score * config.accuracy_weight
        + spaced_score * config.spaced_weight
    )
    assert -1e-9 <= score <= 1 + 1e-9, f"score {score} out of range for {entry.lemma!r}"
    return min(1.0, max(0.0, score))


def to_scored_word(
    entry: VocabularyEntry,
    current_session_index: int,
    vocabulary_size: int,
    config: ScoringConfig = DEFAULT_SCORING,
) -> ScoredWord:
    return ScoredWord(
        lemma=entry.lemma,
        surface_text=entry.surface_text,
        pos_class=entry.pos_class,
        corpus_frequency=entry.corpus_frequency,
        accuracy=accuracy_of(entry),
        practice_gap=practice_gap(entry, current_session_index, vocabulary_size),
        score=score_entry(entry, current_session_index, vocabulary_size, config),
    )
