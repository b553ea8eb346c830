"""Word Selection for Practice Sessions

Ranks a learner's whole vocabulary by composite score, keeps the top
``CANDIDATE_POOL_FACTOR * target_count`` words, then draws the session's
words from that pool with probability proportional to score.

The pool factor sets how far down the ranking a draw can reach; a plain
top-K cut would return the same words every session.
"""
import random
from collections.abc import Sequence

from core.logging import scheduler_logger
from core.errors import (
    AppError,
    Ok,
    Result,
    constraint_violation,
    duplicate_entry,
    out_of_range,
    precondition_failed,
    validation_error,
)
from engines.scoring import (
    DEFAULT_SCORING,
    MAX_CORPUS_FREQUENCY,
    ScoredWord,
    ScoringConfig,
    VocabularyEntry,
    to_scored_word,
)

log = scheduler_logger()

CANDIDATE_POOL_FACTOR = 3


def check_vocabulary_snapshot(
    vocabulary: Sequence[VocabularyEntry],
    current_session_index: int,
) -> Result[None, AppError]:
    """Validate a vocabulary snapshot before scheduling.

    Returns:
        Ok(None) when the snapshot is consistent
        Err(AppError) for the first problem found
    """
    origin = "selection.snapshot"
    if current_session_index < 0:
        return out_of_range("current_session_index", current_session_index, min_val=0, origin=origin)

    seen: set[str] = set()
    for entry in vocabulary:
        if not entry.lemma:
            return validation_error("lemma must not be empty", field="lemma", origin=origin)
        if entry.lemma in seen:
            return duplicate_entry("lemma", entry.lemma, origin=origin)
        seen.add(entry.lemma)

        if not 0 <= entry.corpus_frequency <= MAX_CORPUS_FREQUENCY:
            return out_of_range("corpus_frequency", entry.corpus_frequency, 0, MAX_CORPUS_FREQUENCY, origin=origin)
        if entry.times_seen < 0:
            return out_of_range("times_seen", entry.times_seen, min_val=0, origin=origin)
        if entry.times_correct < 0:
            return out_of_range("times_correct", entry.times_correct, min_val=0, origin=origin)
        if entry.times_correct > entry.times_seen:
            return constraint_violation(
                "times_correct",
                "times_correct <= times_seen",
                value=f"{entry.lemma}: {entry.times_correct}/{entry.times_seen}",
                origin=origin,
            )
        last = entry.last_practiced_session_index
        if last is not None and last > current_session_index:
            return precondition_failed(
                f"last practiced session of '{entry.lemma}' <= current session",
                reason=f"{last} > {current_session_index}",
                origin=origin,
            )
    return Ok(None)


def rank_words(
    vocabulary: Sequence[VocabularyEntry],
    current_session_index: int,
    config: ScoringConfig = DEFAULT_SCORING,
) -> list[ScoredWord]:
    """Score every entry and sort by score, highest first.

    The sort is stable, so equal scores keep snapshot order and repeated
    calls on an unchanged snapshot return the same ranking.
    """
    vocabulary_size = len(vocabulary)
    scored = [to_scored_word(entry, current_session_index, vocabulary_size, config) for entry in vocabulary]
    return sorted(scored, key=lambda w: w.score, reverse=True)


def candidate_pool(
    ranked: Sequence[ScoredWord],
    target_count: int,
    pool_factor: int = CANDIDATE_POOL_FACTOR,
) -> list[ScoredWord]:
    """Top ``pool_factor * target_count`` ranked words."""
    return list(ranked[:min(pool_factor * max(target_count, 0), len(ranked))])


def weighted_sample(
    candidates: Sequence[ScoredWord],
    target_count: int,
    rng: random.Random | None = None,
) -> list[ScoredWord]:
    """Draw up to ``target_count`` distinct words, each draw weighted by score.

    Sampling is without replacement: a drawn word leaves the pool before the
    next draw. When every remaining word scores 0 the draw is uniform.
    """
    rng = rng or random.Random()
    remaining = list(candidates)
    selected: list[ScoredWord] = []

    while remaining and len(selected) < target_count:
        total_weight = sum(w.score for w in remaining)

        if total_weight <= 0:
            index = rng.randrange(len(remaining))
            log.info("uniform_fallback", remaining=len(remaining))
        else:
            threshold = rng.uniform(0, total_weight)
            index = len(remaining) - 1  # float rounding can leave threshold at the total
            cumulative = 0.0
            for i, word in enumerate(remaining):
                cumulative += word.score
                if cumulative > threshold:
                    index = i
                    break

        selected.append(remaining.pop(index))

    assert len({w.lemma for w in selected}) == len(selected), "duplicate lemma in sample"
    return selected


def select_words_for_practice(
    vocabulary: Sequence[VocabularyEntry],
    current_session_index: int,
    target_count: int,
    *,
    config: ScoringConfig = DEFAULT_SCORING,
    pool_factor: int = CANDIDATE_POOL_FACTOR,
    rng: random.Random | None = None,
) -> list[ScoredWord]:
    """Pick the words to drill in the next session.

    Args:
        vocabulary: The learner's full vocabulary snapshot
        current_session_index: The learner's session counter
        target_count: Number of words wanted
        config: Scoring weights and intervals
        pool_factor: Ranked words kept per target word before sampling
        rng: Random source, injectable for reproducible runs

    Returns:
        Up to ``target_count`` distinct words; empty for an empty vocabulary
    """
    if not vocabulary or target_count <= 0:
        log.debug("no_words_to_select", vocabulary_size=len(vocabulary), target_count=target_count)
        return []

    ranked = rank_words(vocabulary, current_session_index, config)
    pool = candidate_pool(ranked, target_count, pool_factor)
    selected = weighted_sample(pool, target_count, rng)

    log.debug(
        "words_selected",
        vocabulary_size=len(vocabulary),
        pool_size=len(pool),
        selected=len(selected),
        session_index=current_session_index,
        top_score=round(ranked[0].score, 3),
    )
    return selected
