"""
Tests for folding session results into vocabulary statistics.

Run: python -m pytest tests/test_tracking.py -v
"""
import pytest

from core.errors import ErrorCode
from engines.exercises import ExerciseWord, FillInBlankExercise, MultipleChoiceExercise
from engines.tracking import (
    ExerciseResult,
    apply_session_results,
    performance_band,
    summarize_session,
    vocabulary_stats,
)


@pytest.fixture
def vocabulary(entry_factory):
    return [
        entry_factory('aller', seen=4, correct=1, last=2),
        entry_factory('maison'),
        entry_factory('chat', seen=2, correct=2, last=5),
    ]


class TestApplySessionResults:

    def test_counts_and_session_stamp(self, vocabulary):
        results = [
            ExerciseResult('multiple_choice', 'aller', True),
            ExerciseResult('word_translation', 'maison', False),
        ]
        update = apply_session_results(vocabulary, results, 6).unwrap()

        assert update.session_index == 7
        aller, maison, chat = update.entries
        assert (aller.times_seen, aller.times_correct, aller.last_practiced_session_index) == (5, 2, 7)
        assert (maison.times_seen, maison.times_correct, maison.last_practiced_session_index) == (1, 0, 7)
        assert chat == vocabulary[2]
        assert update.updated_lemmas == ('aller', 'maison')

    def test_word_in_two_exercises_is_updated_twice(self, vocabulary):
        results = [
            ExerciseResult('matching', 'chat', True),
            ExerciseResult('multiple_choice', 'chat', False),
        ]
        update = apply_session_results(vocabulary, results, 6).unwrap()
        chat = update.entries[2]
        assert (chat.times_seen, chat.times_correct) == (4, 3)
        assert update.updated_lemmas == ('chat',)

    def test_snapshot_is_not_mutated(self, vocabulary):
        before = list(vocabulary)
        apply_session_results(vocabulary, [ExerciseResult('matching', 'aller', True)], 6)
        assert vocabulary == before

    def test_empty_session_still_advances(self, vocabulary):
        update = apply_session_results(vocabulary, [], 6).unwrap()
        assert update.session_index == 7
        assert update.entries == tuple(vocabulary)
        assert update.updated_lemmas == ()

    def test_unknown_lemma(self, vocabulary):
        result = apply_session_results(vocabulary, [ExerciseResult('matching', 'inconnu', True)], 6)
        assert result.is_err()
        assert result.unwrap_err().code == ErrorCode.E2007_UNKNOWN_REFERENCE

    def test_negative_session_index(self, vocabulary):
        result = apply_session_results(vocabulary, [], -1)
        assert result.unwrap_err().code == ErrorCode.E2003_OUT_OF_RANGE


class TestSummarizeSession:

    @pytest.mark.parametrize("accuracy,band", [
        (100, 'excellent'),
        (90, 'excellent'),
        (89.9, 'great'),
        (75, 'great'),
        (60, 'good'),
        (59.9, 'keep_practicing'),
        (0, 'keep_practicing'),
    ])
    def test_performance_bands(self, accuracy, band):
        assert performance_band(accuracy) == band

    def test_totals_and_averages(self):
        results = [
            ExerciseResult('multiple_choice', 'a', True, 1000),
            ExerciseResult('multiple_choice', 'b', True, 2000),
            ExerciseResult('word_translation', 'c', False, 4000),
        ]
        summary = summarize_session(results)
        assert summary.correct == 2
        assert summary.total == 3
        assert summary.accuracy_pct == 66.7
        assert summary.average_time_ms == 2333.3
        assert summary.performance == 'good'
        assert summary.difficulty is None

    def test_difficulty_from_exercises(self):
        word = ExerciseWord('aller', 'va', 'goes', 'Il va bien.')
        exercises = [
            MultipleChoiceExercise(word=word, prompt='p', options=()),
            FillInBlankExercise(word=word, sentence_with_blank='Il ___ bien.'),
        ]
        summary = summarize_session([ExerciseResult('multiple_choice', 'aller', True)], exercises)
        assert summary.difficulty == 1.5

    def test_empty_session(self):
        summary = summarize_session([])
        assert (summary.correct, summary.total, summary.accuracy_pct) == (0, 0, 0.0)
        assert summary.performance == 'keep_practicing'

    def test_to_dict_keys(self):
        payload = summarize_session([ExerciseResult('matching', 'a', True)]).to_dict()
        assert set(payload) == {'correct', 'total', 'accuracyPct', 'averageTimeMs', 'difficulty', 'performance'}


class TestVocabularyStats:

    def test_averages(self, vocabulary):
        stats = vocabulary_stats(vocabulary)
        assert stats.total_words == 3
        assert stats.average_seen_count == 2.0
        # (1 + 0 + 2) / 3 correct over 2 seen
        assert stats.average_accuracy == pytest.approx(0.5)

    def test_nothing_seen(self, entry_factory):
        stats = vocabulary_stats([entry_factory('a'), entry_factory('b')])
        assert stats.average_accuracy == 0.0
        assert stats.to_dict() == {'totalWords': 2, 'averageAccuracy': 0.0, 'averageSeenCount': 0.0}

    def test_empty(self):
        assert vocabulary_stats([]).total_words == 0
