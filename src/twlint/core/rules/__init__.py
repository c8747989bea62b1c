"""lint 規則"""

from .base import BaseRule
from .mainland_terms import MainlandTermsRule
from .simplified_chars import SimplifiedCharsRule

__all__ = [
    "BaseRule",
    "SimplifiedCharsRule",
    "MainlandTermsRule",
]
