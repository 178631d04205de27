"""
Pattern definitions
"""

from .pattern_definition import PatternDefinition, PatternFamily, PatternLibrary, PairConstraint

__all__ = [
    'PatternDefinition',
    'PatternFamily',
    'PatternLibrary',
    'PairConstraint'
]
