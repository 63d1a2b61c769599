"""Fighter input models."""
from fighters.fighter import Fighter, Rating, Tendency

__all__ = ['Fighter', 'Rating', 'Tendency']
