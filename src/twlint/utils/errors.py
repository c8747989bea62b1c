"""
錯誤型別

- DictionaryLoadError: 詞庫遺失或格式錯誤（呼叫端可逐一捕捉後繼續）
- RuleExecutionError: 規則執行失敗
- ConfigError: 設定區塊不合法
"""

from typing import Optional


class TWLintError(Exception):
    """twlint 所有錯誤的基底類別"""


class DictionaryLoadError(TWLintError):
    def __init__(self, name: str, reason: str):
        super().__init__(f'Failed to load dictionary "{name}": {reason}')
        self.name = name
        self.reason = reason


class RuleExecutionError(TWLintError):
    def __init__(self, rule_name: str, cause: Optional[BaseException] = None):
        detail = format_error(cause) if cause is not None else "unknown error"
        super().__init__(f'Rule "{rule_name}" failed: {detail}')
        self.rule_name = rule_name
        self.cause = cause


class ConfigError(TWLintError):
    pass


def format_error(error: BaseException) -> str:
    message = str(error)
    return message if message else type(error).__name__
