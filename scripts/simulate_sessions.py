"""Run a few practice sessions over a synthetic French vocabulary.

Each round selects words, builds the exercise mix, answers every exercise
with a per-word success rate and folds the results back in, then prints
what was drilled. Useful for eyeballing how the scheduler rotates words.

    python scripts/simulate_sessions.py --sessions 5 --seed 7
"""
import argparse
import os
import random
import sys

# Add backend to path
sys.path.append(os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'backend'))

from engines.scoring import VocabularyEntry
from engines.selection import select_words_for_practice
from engines.exercises import WordData, generate_exercise_mix, calculate_session_difficulty
from engines.tracking import ExerciseResult, apply_session_results, summarize_session

# lemma, surface, pos, frequency, translation, context, chance of answering correctly
WORDS = [
    ('aller', 'va', 'VER', 95, 'goes', 'Il va au marché demain.', 0.9),
    ('être', 'est', 'VER', 100, 'is', 'Elle est très contente.', 0.95),
    ('avoir', 'a', 'VER', 98, 'has', 'Il a un chat noir.', 0.9),
    ('marché', 'marché', 'NOM', 40, 'market', 'Le marché ouvre à huit heures.', 0.7),
    ('demain', 'demain', 'ADV', 55, 'tomorrow', 'On se voit demain matin.', 0.8),
    ('maison', 'maison', 'NOM', 70, 'house', 'La maison est grande.', 0.85),
    ('chat', 'chat', 'NOM', 45, 'cat', 'Le chat dort sur le canapé.', 0.9),
    ('vouloir', 'veut', 'VER', 80, 'wants', 'Elle veut partir.', 0.6),
    ('pouvoir', 'peut', 'VER', 85, 'can', 'On peut commencer.', 0.5),
    ('souvent', 'souvent', 'ADV', 50, 'often', 'Il pleut souvent ici.', 0.4),
    ('voiture', 'voiture', 'NOM', 48, 'car', None, 0.7),
    ('heureux', 'heureux', 'ADJ', 35, 'happy', 'Il semble heureux.', 0.6),
    ('grand', 'grande', 'ADJ', 75, 'big', 'La maison est grande.', 0.8),
    ('manger', 'mange', 'VER', 60, None, 'Elle mange une pomme.', 0.7),
    ('lentement', 'lentement', 'ADV', 20, 'slowly', 'Il marche lentement.', 0.3),
]


def simulate(sessions: int, seed: int, target_count: int) -> None:
    rng = random.Random(seed)
    vocabulary = [VocabularyEntry(lemma=w[0], surface_text=w[1], pos_class=w[2], corpus_frequency=w[3]) for w in WORDS]
    word_data = {w[0]: WordData(translation=w[4], context_sentence=w[5]) for w in WORDS}
    success = {w[0]: w[6] for w in WORDS}
    session_index = 0

    for _ in range(sessions):
        words = select_words_for_practice(vocabulary, session_index, target_count, rng=rng)
        exercises = generate_exercise_mix(words, word_data, rng=rng)
        if not exercises:
            print(f"Session {session_index}: no exercises available")
            break

        results = [
            ExerciseResult(ex.type, lemma, rng.random() < success[lemma], rng.randint(1500, 9000))
            for ex in exercises
            for lemma in ex.lemmas
        ]
        update = apply_session_results(vocabulary, results, session_index).unwrap()
        summary = summarize_session(results, exercises)

        print(f"\nSession {session_index} (difficulty {calculate_session_difficulty(exercises)})")
        print("  words:", ", ".join(f"{w.lemma}={w.score:.2f}" for w in words))
        for ex in exercises:
            print(f"  {ex.type:<17} {', '.join(ex.lemmas)}")
        print(f"  {summary.correct}/{summary.total} correct, {summary.performance}")

        vocabulary = list(update.entries)
        session_index = update.session_index


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument('--sessions', type=int, default=5)
    parser.add_argument('--seed', type=int, default=0)
    parser.add_argument('--words', type=int, default=10)
    args = parser.parse_args()
    simulate(args.sessions, args.seed, args.words)
