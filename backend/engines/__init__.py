from engines.scoring import ScoringConfig, VocabularyEntry, ScoredWord, score_entry
from engines.selection import select_words_for_practice, check_vocabulary_snapshot
from engines.exercises import ExerciseMixAssembler, WordData, generate_exercise_mix, calculate_session_difficulty
from engines.tracking import ExerciseResult, apply_session_results, summarize_session, vocabulary_stats

__all__ = [
    "ScoringConfig",
    "VocabularyEntry",
    "ScoredWord",
    "score_entry",
    "select_words_for_practice",
    "check_vocabulary_snapshot",
    "ExerciseMixAssembler",
    "WordData",
    "generate_exercise_mix",
    "calculate_session_difficulty",
    "ExerciseResult",
    "apply_session_results",
    "summarize_session",
    "vocabulary_stats",
]
