"""
.twlintignore 讀取

格式:
- 每行一個 glob
- "#" 開頭為註解，空行略過
- 以 "/" 結尾的目錄模式轉為 "dir/**"
- 不含 "/" 也不含 "*" 的模式加上 "**/" 前綴，匹配任意深度
"""

from pathlib import Path
from typing import List, Optional, Union

from twlint.utils.logger import get_logger

IGNORE_FILE_NAME = ".twlintignore"

_logger = get_logger("ignore")


def parse_ignore_file(content: str) -> List[str]:
    patterns: List[str] = []
    for raw in content.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if line.endswith("/"):
            line = line + "**"
        elif "/" not in line and "*" not in line:
            line = "**/" + line
        patterns.append(line)
    return patterns


def load_ignore_file(cwd: Optional[Union[str, Path]] = None) -> List[str]:
    """讀取 cwd 下的 .twlintignore；不存在時回傳空串列"""
    path = Path(cwd or Path.cwd()) / IGNORE_FILE_NAME
    if not path.is_file():
        return []
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        _logger.warning(f"Failed to read {path}: {exc}")
        return []
    patterns = parse_ignore_file(content)
    _logger.debug(f"Loaded {len(patterns)} patterns from {path}")
    return patterns
