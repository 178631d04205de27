"""
Matcher modules
"""

from .pattern_matcher import find_pattern, find_best_hypothesis
from .matcher_utils import MatchingHypothesis

__all__ = [
    'find_pattern',
    'find_best_hypothesis',
    'MatchingHypothesis'
]
