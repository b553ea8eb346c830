"""Practice Scheduling API

Stateless endpoints over the scheduler engines. The caller sends the
learner's vocabulary snapshot (and translations/contexts it fetched itself);
nothing is stored here.
"""
import random
from dataclasses import asdict
from functools import lru_cache
from typing import Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, model_validator

from core.config import get_settings
from core.errors import raise_result
from core.logging import api_logger, session_context
from engines.scoring import ScoredWord, ScoringConfig, VocabularyEntry
from engines.selection import check_vocabulary_snapshot, select_words_for_practice
from engines.exercises import WordData, calculate_session_difficulty, generate_exercise_mix
from engines.tracking import ExerciseResult, apply_session_results, summarize_session, vocabulary_stats

router = APIRouter()
log = api_logger()

NO_WORDS_MESSAGE = "no words available for practice"
NO_EXERCISES_MESSAGE = "no exercises available"


@lru_cache
def get_scoring_config() -> ScoringConfig:
    return ScoringConfig.from_settings(get_settings())


def get_rng() -> random.Random:
    return random.Random()


class VocabularyEntryIn(BaseModel):
    lemma: str = Field(min_length=1)
    surface_text: str = Field(min_length=1)
    pos_class: str = ""
    corpus_frequency: float = Field(ge=0, le=100)
    times_seen: int = Field(0, ge=0)
    times_correct: int = Field(0, ge=0)
    last_practiced_session_index: int | None = Field(None, ge=0)

    @model_validator(mode="after")
    def check_correct_within_seen(self):
        if self.times_correct > self.times_seen:
            raise ValueError(f"times_correct ({self.times_correct}) exceeds times_seen ({self.times_seen})")
        return self

    def to_entry(self) -> VocabularyEntry:
        return VocabularyEntry(**self.model_dump())


class ScoredWordIn(BaseModel):
    lemma: str = Field(min_length=1)
    surface_text: str = Field(min_length=1)
    pos_class: str = ""
    corpus_frequency: float = Field(ge=0, le=100)
    accuracy: float = Field(0.0, ge=0, le=1)
    practice_gap: int = 0
    score: float = Field(ge=0, le=1)

    def to_word(self) -> ScoredWord:
        return ScoredWord(**self.model_dump())


class WordDataIn(BaseModel):
    translation: str | None = None
    context_sentence: str | None = None

    def to_data(self) -> WordData:
        return WordData(translation=self.translation, context_sentence=self.context_sentence)


class SelectRequest(BaseModel):
    vocabulary: list[VocabularyEntryIn]
    current_session_index: int = Field(ge=0)
    target_count: int | None = Field(None, ge=1, le=100)


class ExercisesRequest(BaseModel):
    selected_words: list[ScoredWordIn]
    context_by_lemma: dict[str, WordDataIn] = {}
    target_size: int | None = Field(None, ge=1, le=100)


class SessionRequest(SelectRequest):
    context_by_lemma: dict[str, WordDataIn] = {}
    target_size: int | None = Field(None, ge=1, le=100)


class ExerciseResultIn(BaseModel):
    exercise_type: Literal['multiple_choice', 'word_translation', 'fill_in_blank', 'matching']
    lemma: str = Field(min_length=1)
    is_correct: bool
    time_spent_ms: int = Field(0, ge=0)

    def to_result(self) -> ExerciseResult:
        return ExerciseResult(**self.model_dump())


class ResultsRequest(BaseModel):
    vocabulary: list[VocabularyEntryIn]
    results: list[ExerciseResultIn]
    current_session_index: int = Field(ge=0)


def _select(request: SelectRequest, config: ScoringConfig, rng: random.Random) -> list[ScoredWord]:
    entries = [v.to_entry() for v in request.vocabulary]
    raise_result(check_vocabulary_snapshot(entries, request.current_session_index))

    settings = get_settings()
    with session_context(request.current_session_index, vocabulary_size=len(entries)):
        return select_words_for_practice(
            entries,
            request.current_session_index,
            request.target_count or settings.PRACTICE_SESSION_SIZE,
            config=config,
            pool_factor=settings.CANDIDATE_POOL_FACTOR,
            rng=rng,
        )


@router.post("/select")
async def select_words(
    request: SelectRequest,
    config: ScoringConfig = Depends(get_scoring_config),
    rng: random.Random = Depends(get_rng),
):
    """Pick the words for the learner's next session."""
    words = _select(request, config, rng)
    response = {"words": [w.to_dict() for w in words]}
    if not words:
        response["message"] = NO_WORDS_MESSAGE
    return response


@router.post("/exercises")
async def build_exercises(request: ExercisesRequest, rng: random.Random = Depends(get_rng)):
    """Assemble a session from already-selected words and their translations."""
    exercises = generate_exercise_mix(
        [w.to_word() for w in request.selected_words],
        {lemma: data.to_data() for lemma, data in request.context_by_lemma.items()},
        request.target_size or get_settings().PRACTICE_SESSION_SIZE,
        rng,
    )
    response = {
        "exercises": [ex.to_dict() for ex in exercises],
        "difficulty": calculate_session_difficulty(exercises),
    }
    if not exercises:
        response["message"] = NO_EXERCISES_MESSAGE
    return response


@router.post("/session")
async def plan_session(
    request: SessionRequest,
    config: ScoringConfig = Depends(get_scoring_config),
    rng: random.Random = Depends(get_rng),
):
    """Select words and build the exercise mix in one call."""
    words = _select(request, config, rng)
    if not words:
        return {"words": [], "exercises": [], "difficulty": 0, "message": NO_WORDS_MESSAGE}

    exercises = generate_exercise_mix(
        words,
        {lemma: data.to_data() for lemma, data in request.context_by_lemma.items()},
        request.target_size or get_settings().PRACTICE_SESSION_SIZE,
        rng,
    )
    log.info("session_planned", words=len(words), exercises=len(exercises))

    response = {
        "words": [w.to_dict() for w in words],
        "exercises": [ex.to_dict() for ex in exercises],
        "difficulty": calculate_session_difficulty(exercises),
    }
    if not exercises:
        response["message"] = NO_EXERCISES_MESSAGE
    return response


@router.post("/results")
async def record_results(request: ResultsRequest):
    """Apply a finished session's results to the snapshot and summarize it."""
    entries = [v.to_entry() for v in request.vocabulary]
    raise_result(check_vocabulary_snapshot(entries, request.current_session_index))

    results = [r.to_result() for r in request.results]
    with session_context(request.current_session_index, results=len(results)):
        update_result = apply_session_results(entries, results, request.current_session_index)
    raise_result(update_result)
    update = update_result.unwrap()

    return {
        "sessionIndex": update.session_index,
        "entries": [asdict(e) for e in update.entries],
        "updatedLemmas": list(update.updated_lemmas),
        "summary": summarize_session(results).to_dict(),
        "stats": vocabulary_stats(update.entries).to_dict(),
    }


@router.get("/config")
async def scoring_config(config: ScoringConfig = Depends(get_scoring_config)):
    """Active scoring weights and review intervals."""
    return config.to_dict()
