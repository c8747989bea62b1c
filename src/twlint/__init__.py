"""
twlint - 臺灣繁體中文 linter

檢查文件中的簡體字與大陸用語，回報問題或自動修正為臺灣慣用的繁體中文。

核心概念:
- 先把文本簡轉繁，再以詞庫比對大陸用語
- 重疊的候選依「長度 > 信心度 > 位置」取捨，term == replacement 的詞條
  用來擋住較短的誤判
- 回報的行欄一律指向原文

官方入口（穩定 API）:
- `twlint.TWLinter`
- `twlint.normalize_config`
"""

# =============================================================================
# Linter（官方入口）
# =============================================================================
from twlint.core.linter import TWLinter
from twlint.config import ConfigBlock, LinterConfig, normalize_config

# =============================================================================
# 詞庫與比對引擎（進階用途）
# =============================================================================
from twlint.core.dictionary import CompiledDictionary, DictEntry, compile_dictionary
from twlint.core.dictionary_manager import DictionaryManager
from twlint.core.types import Issue, LintResult, MatchResult, MatchStrategyType, Severity

# =============================================================================
# 日誌工具
# =============================================================================
from twlint.utils.logger import enable_debug_logging, get_logger

# =============================================================================
# 錯誤型別
# =============================================================================
from twlint.utils.errors import ConfigError, DictionaryLoadError, RuleExecutionError, TWLintError

__all__ = [
    # Linter
    "TWLinter",
    "normalize_config",
    "ConfigBlock",
    "LinterConfig",
    # Engine (advanced)
    "DictionaryManager",
    "CompiledDictionary",
    "DictEntry",
    "compile_dictionary",
    "MatchResult",
    "MatchStrategyType",
    "Issue",
    "LintResult",
    "Severity",
    # Logging
    "get_logger",
    "enable_debug_logging",
    # Errors
    "TWLintError",
    "DictionaryLoadError",
    "RuleExecutionError",
    "ConfigError",
]

__version__ = "0.1.0"
