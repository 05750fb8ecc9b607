"""Spaced-repetition flashcard scheduling."""
