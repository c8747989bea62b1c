"""
核心層

資料模型、詞庫與比對引擎、位置對照、規則與 linter 協調者。
"""

from .config_matcher import ConfigMatcher, match_glob, matches_any_pattern
from .converter import Converter, OpenCCConverter, get_default_converter
from .dictionary import CompiledDictionary, DictEntry, compile_dictionary
from .dictionary_manager import DictionaryManager
from .events import LintEvent, LintEventHandler
from .ignore_file import load_ignore_file, parse_ignore_file
from .linter import TWLinter
from .loading_strategies import DictLoadStrategyFactory
from .position_mapper import PositionMapper
from .rules import BaseRule, MainlandTermsRule, SimplifiedCharsRule
from .types import (
    ContextRule,
    DictLookupEntry,
    Issue,
    LintResult,
    MatchCandidate,
    MatchResult,
    MatchStrategyType,
    Severity,
)

__all__ = [
    "TWLinter",
    "DictionaryManager",
    "CompiledDictionary",
    "DictEntry",
    "compile_dictionary",
    "DictLoadStrategyFactory",
    "PositionMapper",
    "ConfigMatcher",
    "match_glob",
    "matches_any_pattern",
    "load_ignore_file",
    "parse_ignore_file",
    "Converter",
    "OpenCCConverter",
    "get_default_converter",
    "BaseRule",
    "SimplifiedCharsRule",
    "MainlandTermsRule",
    "LintEvent",
    "LintEventHandler",
    "ContextRule",
    "DictLookupEntry",
    "MatchCandidate",
    "MatchResult",
    "MatchStrategyType",
    "Issue",
    "LintResult",
    "Severity",
]
