"""
TWLinter：lint / fix 的協調者

職責:
- 依檔案路徑決定要執行的規則與嚴重度、要載入的詞庫
- 逐規則執行 check / fix；單一規則失敗只影響該規則
- 批次處理檔案，單一檔案失敗不會中斷整批

使用方式:
    from twlint import TWLinter

    linter = TWLinter({"domains": ["software-development"]})
    issues = linter.lint_text("这个软件需要网络连接")
    fixed = linter.fix_text("这个软件需要网络连接")
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Union

from twlint.config import (
    FILE_READ_ERROR_RULE,
    FILE_WRITE_ERROR_RULE,
    MAINLAND_TERMS_RULE,
    SIMPLIFIED_CHARS_RULE,
    normalize_config,
)
from twlint.utils.errors import RuleExecutionError, format_error
from twlint.utils.logger import TimingContext, get_logger, setup_logger

from .config_matcher import ConfigMatcher
from .converter import Converter, get_default_converter
from .dictionary_manager import DictionaryManager
from .events import LintEvent, LintEventHandler
from .ignore_file import load_ignore_file
from .loading_strategies import DictLoadStrategyFactory
from .rules import BaseRule, MainlandTermsRule, SimplifiedCharsRule
from .types import Issue, LintResult, Severity

PathLike = Union[str, Path]


class TWLinter:
    """
    臺灣繁體中文 linter

    Args:
        config: 使用者設定（單一區塊、區塊串列或 LinterConfig）
        converter: 簡轉繁轉換器，預設使用 OpenCC (s2tw)
        dictionary_manager: 共用的詞庫管理器（測試時可注入）
        ignore_patterns: 額外的忽略模式；None 時讀取目前目錄的 .twlintignore
        on_event: 降級事件回呼
        verbose: 是否輸出 DEBUG 日誌
        deep: 是否載入詞庫目錄中所有詞庫
    """

    def __init__(
        self,
        config=None,
        *,
        converter: Optional[Converter] = None,
        dictionary_manager: Optional[DictionaryManager] = None,
        ignore_patterns: Optional[Sequence[str]] = None,
        on_event: Optional[LintEventHandler] = None,
        verbose: bool = False,
        deep: bool = False,
    ):
        self._logger = get_logger("linter")
        if verbose:
            setup_logger(level=logging.DEBUG)

        self.config = normalize_config(config, deep=deep, verbose=verbose)
        self.deep = deep or self.config.deep
        if ignore_patterns is None:
            ignore_patterns = load_ignore_file()
        self.matcher = ConfigMatcher(self.config, ignore_patterns)

        self.converter = converter or get_default_converter()
        self.dictionary_manager = dictionary_manager or DictionaryManager(on_event=on_event)
        self._on_event = on_event

        # 順序即 fix 的執行順序：簡轉繁必須先於用語替換
        self.rules: Dict[str, BaseRule] = {
            SIMPLIFIED_CHARS_RULE: SimplifiedCharsRule(self.converter),
            MAINLAND_TERMS_RULE: MainlandTermsRule(self.dictionary_manager, self.converter),
        }

    # ==================== 內部工具 ====================

    def _emit(self, event: LintEvent) -> None:
        try:
            if self._on_event is not None:
                self._on_event(event)
        except Exception:
            self._logger.exception("on_event 回呼執行失敗")

    def _active_rules(self, file_path: Optional[str]) -> List[tuple]:
        """(rule, 設定的嚴重度)，依 self.rules 的順序；off 與未設定的規則不執行"""
        configured = self.matcher.get_rules_for_file(file_path)
        active = []
        for name, rule in self.rules.items():
            level = configured.get(name)
            if level is None or level == "off":
                continue
            active.append((rule, level))
        return active

    def dictionaries_for(self, file_path: Optional[str] = None) -> List[str]:
        """決定檔案要使用的詞庫名稱"""
        domains = self.matcher.get_domains_for_file(file_path)
        strategy = DictLoadStrategyFactory.create(domains=domains, deep=self.deep)
        return strategy.get_dictionaries(self.dictionary_manager)

    @staticmethod
    def _apply_level(issues: List[Issue], level: str) -> List[Issue]:
        if level == Severity.ERROR.value:
            for issue in issues:
                issue.severity = Severity.ERROR
        return issues

    # ==================== 文字 ====================

    def lint_text(self, text: str, file_path: Optional[PathLike] = None) -> List[Issue]:
        """
        檢查文字

        Args:
            text: 待檢查文字
            file_path: 文字所屬檔案（決定套用的設定區塊）；None 時只套用未限定 files 的區塊

        Returns:
            依規則順序排列的問題清單
        """
        path = str(file_path) if file_path is not None else None
        active = self._active_rules(path)
        if not active:
            return []

        dictionaries = self.dictionaries_for(path)
        issues: List[Issue] = []
        with TimingContext("TWLinter.lint_text", self._logger):
            for rule, level in active:
                try:
                    rule_issues = rule.check(text, dictionaries=dictionaries)
                except Exception as exc:
                    error = RuleExecutionError(rule.name, exc)
                    self._logger.warning(format_error(error))
                    self._emit(
                        {
                            "type": "rule_error",
                            "file_path": path or "<text>",
                            "rule": rule.name,
                            "exception_type": type(exc).__name__,
                            "exception_message": format_error(exc),
                        }
                    )
                    continue
                issues.extend(self._apply_level(rule_issues, level))
        return issues

    def fix_text(self, text: str, file_path: Optional[PathLike] = None) -> str:
        """
        修正文字

        規則依序套用；某規則修正失敗時保留前面規則的結果並繼續。
        """
        path = str(file_path) if file_path is not None else None
        active = self._active_rules(path)
        if not active:
            return text

        dictionaries = self.dictionaries_for(path)
        fixed = text
        with TimingContext("TWLinter.fix_text", self._logger):
            for rule, _level in active:
                if not rule.fixable:
                    continue
                try:
                    fixed = rule.fix(fixed, dictionaries=dictionaries)
                except Exception as exc:
                    self._logger.warning(f'Fix for rule "{rule.name}" failed: {format_error(exc)}')
                    self._emit(
                        {
                            "type": "fix_error",
                            "file_path": path or "<text>",
                            "rule": rule.name,
                            "exception_type": type(exc).__name__,
                            "exception_message": format_error(exc),
                        }
                    )
        return fixed

    # ==================== 檔案 ====================

    def _read(self, path: str) -> str:
        return Path(path).read_text(encoding="utf-8")

    def _write(self, path: str, text: str) -> None:
        """先寫入同目錄的暫存檔再取代原檔，失敗時原檔不變"""
        target = Path(path)
        fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(text)
            if target.exists():
                os.chmod(tmp_name, target.stat().st_mode & 0o7777)
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _file_failure(self, path: str, exc: Exception, action: str, rule: str) -> Issue:
        self._logger.warning(f"Failed to {action} {path}: {format_error(exc)}")
        self._emit(
            {
                "type": "file_error",
                "file_path": path,
                "exception_type": type(exc).__name__,
                "exception_message": format_error(exc),
            }
        )
        return Issue(
            line=1,
            column=1,
            message=f"Failed to {action} file: {format_error(exc)}",
            severity=Severity.ERROR,
            rule=rule,
            fixable=False,
        )

    def _read_failure(self, path: str, exc: Exception) -> LintResult:
        return LintResult(
            file_path=path,
            messages=[self._file_failure(path, exc, "read", FILE_READ_ERROR_RULE)],
        )

    def _targets(self, paths: Iterable[PathLike]) -> List[str]:
        targets: List[str] = []
        for file_path in dict.fromkeys(str(p) for p in paths):
            if self.matcher.is_ignored(file_path):
                self._logger.debug(f"Skipping ignored file: {file_path}")
                continue
            targets.append(file_path)
        return targets

    def lint_files(self, paths: Iterable[PathLike]) -> List[LintResult]:
        """逐一檢查檔案；讀檔失敗轉為 file-read-error 問題，不中斷整批"""
        results: List[LintResult] = []
        for path in self._targets(paths):
            try:
                content = self._read(path)
            except (OSError, UnicodeDecodeError) as exc:
                results.append(self._read_failure(path, exc))
                continue
            results.append(LintResult(file_path=path, messages=self.lint_text(content, path)))
        return results

    def fix_files(self, paths: Iterable[PathLike], write: bool = True) -> List[LintResult]:
        """
        逐一修正檔案

        完整算出修正後全文才寫入，且只在內容有變動時寫入。
        回傳的 LintResult.messages 為修正後仍存在的問題；寫檔失敗時
        附加一筆 file-write-error，原檔維持不變，其餘檔案照常處理。
        """
        results: List[LintResult] = []
        for path in self._targets(paths):
            try:
                content = self._read(path)
            except (OSError, UnicodeDecodeError) as exc:
                results.append(self._read_failure(path, exc))
                continue

            fixed = self.fix_text(content, path)
            messages = self.lint_text(fixed, path)
            if write and fixed != content:
                try:
                    self._write(path, fixed)
                except OSError as exc:
                    messages.append(self._file_failure(path, exc, "write", FILE_WRITE_ERROR_RULE))
                else:
                    self._logger.debug(f"Wrote fixes to {path}")

            results.append(LintResult(file_path=path, messages=messages, output=fixed))
        return results
