import random

import pytest

from engines.scoring import ScoredWord, VocabularyEntry
from engines.exercises import WordData


def make_entry(lemma, frequency=50, seen=0, correct=0, last=None, pos='NOM', surface=None):
    return VocabularyEntry(
        lemma=lemma,
        surface_text=surface or lemma,
        pos_class=pos,
        corpus_frequency=frequency,
        times_seen=seen,
        times_correct=correct,
        last_practiced_session_index=last,
    )


def make_word(lemma, score=0.5, frequency=50, pos='NOM', surface=None):
    return ScoredWord(
        lemma=lemma,
        surface_text=surface or lemma,
        pos_class=pos,
        corpus_frequency=frequency,
        accuracy=0.0,
        practice_gap=0,
        score=score,
    )


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def entry_factory():
    return make_entry


@pytest.fixture
def word_factory():
    return make_word


@pytest.fixture
def full_session_words():
    """Ten selected words, all with translation and a context containing the word."""
    words = [make_word(f'mot{i}', score=1 - i * 0.05) for i in range(10)]
    data = {
        w.lemma: WordData(translation=f'word {i}', context_sentence=f'Voici le {w.lemma} du jour.')
        for i, w in enumerate(words)
    }
    return words, data
