"""
事件模型（Event Model）

lint 流程遇到可降級的錯誤（單一詞庫載入失敗、單一規則失敗、讀檔失敗）時
不會中斷整批處理，但也不應「默默」降級：除了寫 warning 日誌，
也會透過 on_event 回呼通知呼叫端。
"""

from __future__ import annotations

from typing import Callable, Literal, TypedDict


class LintEvent(TypedDict, total=False):
    type: Literal["dictionary_error", "rule_error", "fix_error", "file_error"]
    file_path: str
    rule: str
    dictionary: str
    exception_type: str
    exception_message: str


LintEventHandler = Callable[[LintEvent], None]
