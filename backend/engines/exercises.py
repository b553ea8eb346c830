"""Exercise Mix Assembler

Builds one practice session from the words picked by the selector.
Supports: multiple_choice, word_translation, fill_in_blank, matching

Each type has data prerequisites (a translation, a context sentence) and a
fixed share of the session. Words missing data are skipped for the types
that need it; the session comes back shorter rather than padded.
"""
import math
import random
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import ClassVar, Literal, Union
from uuid import uuid4

from core.logging import engine_logger
from engines.scoring import ScoredWord

log = engine_logger()

ExerciseType = Literal['multiple_choice', 'word_translation', 'fill_in_blank', 'matching']
Direction = Literal['fr_to_en', 'en_to_fr']

# Reporting only; never used to pick exercises
EXERCISE_DIFFICULTIES: dict[ExerciseType, float] = {
    'multiple_choice': 1,
    'matching': 1.5,
    'fill_in_blank': 2,
    'word_translation': 3,
}

EXERCISES_PER_SESSION = 10

# Share of the session per type, rounded down; matching takes what is left
TYPE_SHARES: dict[ExerciseType, float] = {
    'multiple_choice': 0.4,
    'word_translation': 0.3,
    'fill_in_blank': 0.2,
}

DISTRACTOR_COUNT = 3
SIMILAR_FREQUENCY_MIN_RATIO = 0.5
SIMILAR_FREQUENCY_MAX_RATIO = 2.0
MATCHING_MIN_PAIRS = 4
MATCHING_MAX_PAIRS = 6
BLANK_MARKER = '___'


@dataclass(frozen=True, slots=True)
class WordData:
    """Translation and context supplied by the caller for one lemma."""
    translation: str | None = None
    context_sentence: str | None = None


@dataclass(frozen=True, slots=True)
class WordWithContext:
    """Selected word joined with its translation and context sentence."""
    lemma: str
    surface_text: str
    pos_class: str
    corpus_frequency: float
    score: float
    translation: str | None = None
    context_sentence: str | None = None

    @classmethod
    def join(cls, word: ScoredWord, data: WordData | None) -> "WordWithContext":
        data = data or WordData()
        return cls(
            lemma=word.lemma,
            surface_text=word.surface_text,
            pos_class=word.pos_class,
            corpus_frequency=word.corpus_frequency,
            score=word.score,
            translation=data.translation or None,
            context_sentence=data.context_sentence or None,
        )


@dataclass(frozen=True, slots=True)
class ExerciseWord:
    """The word an exercise drills."""
    lemma: str
    text: str
    translation: str | None = None
    context: str | None = None

    @classmethod
    def from_word(cls, word: WordWithContext) -> "ExerciseWord":
        return cls(word.lemma, word.surface_text, word.translation, word.context_sentence)

    def to_dict(self) -> dict:
        return {'lemma': self.lemma, 'text': self.text, 'translation': self.translation, 'context': self.context}


@dataclass(frozen=True, slots=True)
class MultipleChoiceOption:
    text: str
    is_correct: bool


@dataclass(frozen=True, slots=True)
class MatchingPair:
    text: str
    translation: str
    lemma: str


@dataclass(frozen=True, slots=True)
class MultipleChoiceExercise:
    type: ClassVar[ExerciseType] = 'multiple_choice'
    difficulty: ClassVar[float] = EXERCISE_DIFFICULTIES['multiple_choice']

    word: ExerciseWord
    prompt: str
    options: tuple[MultipleChoiceOption, ...]
    id: str = field(default_factory=lambda: str(uuid4()))

    @property
    def lemmas(self) -> tuple[str, ...]:
        return (self.word.lemma,)

    def to_dict(self) -> dict:
        return {
            'id': self.id, 'type': self.type, 'difficulty': self.difficulty,
            'prompt': self.prompt, 'word': self.word.to_dict(),
            'options': [{'text': o.text, 'isCorrect': o.is_correct} for o in self.options],
        }


@dataclass(frozen=True, slots=True)
class WordTranslationExercise:
    type: ClassVar[ExerciseType] = 'word_translation'
    difficulty: ClassVar[float] = EXERCISE_DIFFICULTIES['word_translation']

    word: ExerciseWord
    direction: Direction = 'fr_to_en'
    prompt: str = 'Translate this word'
    id: str = field(default_factory=lambda: str(uuid4()))

    @property
    def lemmas(self) -> tuple[str, ...]:
        return (self.word.lemma,)

    def to_dict(self) -> dict:
        return {
            'id': self.id, 'type': self.type, 'difficulty': self.difficulty,
            'prompt': self.prompt, 'word': self.word.to_dict(), 'direction': self.direction,
        }


@dataclass(frozen=True, slots=True)
class FillInBlankExercise:
    type: ClassVar[ExerciseType] = 'fill_in_blank'
    difficulty: ClassVar[float] = EXERCISE_DIFFICULTIES['fill_in_blank']

    word: ExerciseWord
    sentence_with_blank: str
    prompt: str = 'Complete the sentence'
    id: str = field(default_factory=lambda: str(uuid4()))

    @property
    def lemmas(self) -> tuple[str, ...]:
        return (self.word.lemma,)

    def to_dict(self) -> dict:
        return {
            'id': self.id, 'type': self.type, 'difficulty': self.difficulty,
            'prompt': self.prompt, 'word': self.word.to_dict(), 'sentence': self.sentence_with_blank,
        }


@dataclass(frozen=True, slots=True)
class MatchingExercise:
    type: ClassVar[ExerciseType] = 'matching'
    difficulty: ClassVar[float] = EXERCISE_DIFFICULTIES['matching']

    pairs: tuple[MatchingPair, ...]
    prompt: str = 'Match the pairs'
    id: str = field(default_factory=lambda: str(uuid4()))

    @property
    def lemmas(self) -> tuple[str, ...]:
        return tuple(p.lemma for p in self.pairs)

    def to_dict(self) -> dict:
        return {
            'id': self.id, 'type': self.type, 'difficulty': self.difficulty, 'prompt': self.prompt,
            'pairs': [{'text': p.text, 'translation': p.translation, 'lemma': p.lemma} for p in self.pairs],
        }


Exercise = Union[MultipleChoiceExercise, WordTranslationExercise, FillInBlankExercise, MatchingExercise]


def blank_out(sentence: str, surface_text: str) -> str | None:
    """Replace whole-word, case-insensitive occurrences of ``surface_text`` with a blank.

    Returns None when the sentence does not contain the word.
    """
    if not surface_text:
        return None
    pattern = re.compile(rf'\b{re.escape(surface_text)}\b', re.IGNORECASE)
    blanked, count = pattern.subn(BLANK_MARKER, sentence)
    return blanked if count else None


def generate_distractors(
    target: WordWithContext,
    pool: Sequence[WordWithContext],
    count: int = DISTRACTOR_COUNT,
    rng: random.Random | None = None,
) -> list[str]:
    """Wrong-answer translations for a multiple-choice question.

    Prefers words with the same part of speech and a frequency within
    [0.5x, 2x] of the target, then backfills with any translated word.
    May return fewer than ``count`` when the pool is small.
    """
    rng = rng or random.Random()
    low = target.corpus_frequency * SIMILAR_FREQUENCY_MIN_RATIO
    high = target.corpus_frequency * SIMILAR_FREQUENCY_MAX_RATIO

    def usable(word: WordWithContext) -> bool:
        return bool(word.lemma != target.lemma and word.translation and word.translation != target.translation)

    similar = [
        w for w in pool
        if usable(w) and w.pos_class == target.pos_class and low <= w.corpus_frequency <= high
    ]
    others = [w for w in pool if usable(w)]

    distractors: list[str] = []
    for group in (similar, others):
        group = list(group)
        rng.shuffle(group)
        for word in group:
            if len(distractors) >= count:
                return distractors
            if word.translation not in distractors:
                distractors.append(word.translation)
    return distractors


def calculate_session_difficulty(exercises: Sequence[Exercise]) -> float:
    """Average difficulty weight, rounded to one decimal; 0 for no exercises."""
    if not exercises:
        return 0
    return round(sum(ex.difficulty for ex in exercises) / len(exercises), 1)


class ExerciseMixAssembler:
    """Assembles a varied, shuffled exercise list from selected words."""

    __slots__ = ('_rng',)

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng or random.Random()

    def build_session(
        self,
        selected_words: Sequence[ScoredWord],
        word_data_by_lemma: Mapping[str, WordData],
        target_size: int = EXERCISES_PER_SESSION,
    ) -> list[Exercise]:
        """Build a session of at most ``min(target_size, len(selected_words))`` exercises.

        Multiple choice, translation and fill-in-blank each fill their quota
        in selection order, and a word drilled by one of them is not reused
        by the others. Matching runs last over the score-ordered words and
        may repeat words drilled elsewhere. A lemma listed twice counts once.
        """
        unique: dict[str, ScoredWord] = {}
        for w in selected_words:
            unique.setdefault(w.lemma, w)
        if len(unique) < len(selected_words):
            log.debug("duplicate_words_dropped", dropped=len(selected_words) - len(unique))
        words = [WordWithContext.join(w, word_data_by_lemma.get(w.lemma)) for w in unique.values()]
        max_exercises = min(target_size, len(words))
        if max_exercises <= 0:
            return []

        quotas = {t: math.floor(max_exercises * share) for t, share in TYPE_SHARES.items()}
        used: set[str] = set()
        exercises: list[Exercise] = []

        builders = (
            ('multiple_choice', lambda w: bool(w.translation), lambda w: self._multiple_choice(w, words)),
            ('word_translation', lambda w: bool(w.translation), self._word_translation),
            ('fill_in_blank', lambda w: bool(w.translation and w.context_sentence), self._fill_in_blank),
        )
        for ex_type, eligible, build in builders:
            built = 0
            for word in words:
                if built >= quotas[ex_type]:
                    break
                if word.lemma in used or not eligible(word):
                    continue
                exercise = build(word)
                if exercise is None:
                    log.debug("exercise_skipped", type=ex_type, lemma=word.lemma)
                    continue
                exercises.append(exercise)
                used.add(word.lemma)
                built += 1

        if len(exercises) < max_exercises:
            matching = self._matching(words)
            if matching is not None:
                exercises.append(matching)

        self._rng.shuffle(exercises)
        assert len(exercises) <= max_exercises, "session larger than requested"

        log.debug(
            "session_built",
            selected=len(words),
            exercises=len(exercises),
            types=[ex.type for ex in exercises],
            difficulty=calculate_session_difficulty(exercises),
        )
        return exercises

    def _multiple_choice(self, word: WordWithContext, pool: Sequence[WordWithContext]) -> MultipleChoiceExercise:
        distractors = generate_distractors(word, pool, DISTRACTOR_COUNT, self._rng)
        options = [MultipleChoiceOption(word.translation, True)]
        options += [MultipleChoiceOption(d, False) for d in distractors]
        self._rng.shuffle(options)
        return MultipleChoiceExercise(
            word=ExerciseWord.from_word(word),
            prompt=f'What does "{word.surface_text}" mean?',
            options=tuple(options),
        )

    def _word_translation(self, word: WordWithContext) -> WordTranslationExercise:
        return WordTranslationExercise(word=ExerciseWord.from_word(word), direction='fr_to_en')

    def _fill_in_blank(self, word: WordWithContext) -> FillInBlankExercise | None:
        sentence = blank_out(word.context_sentence, word.surface_text)
        if sentence is None:
            return None
        return FillInBlankExercise(word=ExerciseWord.from_word(word), sentence_with_blank=sentence)

    def _matching(self, words: Sequence[WordWithContext]) -> MatchingExercise | None:
        """One matching exercise over the best-scored distinct translated words, if enough exist."""
        ranked = sorted(words, key=lambda w: w.score, reverse=True)
        translated = [w for w in ranked if w.translation][:MATCHING_MAX_PAIRS]
        if len(translated) < MATCHING_MIN_PAIRS:
            return None
        return MatchingExercise(
            pairs=tuple(MatchingPair(w.surface_text, w.translation, w.lemma) for w in translated),
        )


def generate_exercise_mix(
    selected_words: Sequence[ScoredWord],
    context_by_lemma: Mapping[str, WordData],
    target_size: int = EXERCISES_PER_SESSION,
    rng: random.Random | None = None,
) -> list[Exercise]:
    """Build a session's exercises; an empty list means no exercise could be built."""
    return ExerciseMixAssembler(rng).build_session(selected_words, context_by_lemma, target_size)
