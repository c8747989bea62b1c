"""
設定正規化與檔案範圍比對測試
"""

import pytest

from twlint.config import DEFAULT_RULES, ConfigBlock, LinterConfig, normalize_config
from twlint.core.config_matcher import ConfigMatcher, match_glob, matches_any_pattern
from twlint.core.ignore_file import IGNORE_FILE_NAME, load_ignore_file, parse_ignore_file
from twlint.utils.errors import ConfigError


class TestNormalizeConfig:
    """設定正規化"""

    def test_none_gives_default_block(self):
        """測試未提供設定時只有預設區塊"""
        config = normalize_config()
        assert len(config.blocks) == 1
        assert config.blocks[0].rules == DEFAULT_RULES
        assert config.blocks[0].dictionary_names == ["core"]

    def test_single_object_and_list_equivalent(self):
        """測試單一物件與陣列得到相同結果"""
        block = {"files": ["**/*.md"], "rules": {"mainland-terms": "error"}}
        assert normalize_config(block).blocks == normalize_config([block]).blocks

    def test_string_globs_become_lists(self):
        """測試字串 glob 轉為串列"""
        config = normalize_config({"files": "**/*.md"})
        assert config.blocks[1].files == ["**/*.md"]

    def test_passthrough(self):
        """測試已正規化的設定原樣回傳"""
        config = LinterConfig(blocks=[ConfigBlock(rules={"mainland-terms": "info"})])
        assert normalize_config(config) is config

    @pytest.mark.parametrize(
        "raw",
        [
            {"rules": {"mainland-terms": "fatal"}},
            {"rules": ["mainland-terms"]},
            {"files": ["a", 1]},
            ["not a block"],
            42,
        ],
    )
    def test_invalid(self, raw):
        """測試不合法的設定拋出 ConfigError"""
        with pytest.raises(ConfigError):
            normalize_config(raw)

    def test_unknown_keys_warned(self, caplog):
        """測試未知欄位只警告不失敗"""
        config = normalize_config({"rulez": {}})
        assert len(config.blocks) == 2
        assert "rulez" in caplog.text


class TestGlob:
    """glob 比對"""

    def test_double_star(self):
        """測試 ** 可跨目錄，也可匹配零層"""
        assert match_glob("README.md", "**/*.md")
        assert match_glob("docs/a/b.md", "**/*.md")
        assert match_glob("tests/a/b.md", "tests/**")

    def test_single_star_stays_in_segment(self):
        """測試 * 不跨目錄"""
        assert not match_glob("src/a/b.md", "src/*.md")
        assert match_glob("src/b.md", "src/*.md")

    def test_basename_pattern(self):
        """測試不含 / 的模式只比對檔名"""
        assert match_glob("deep/dir/readme.md", "*.md")
        assert not match_glob("deep/dir/readme.txt", "*.md")

    def test_braces(self):
        """測試大括號展開"""
        assert match_glob("notes/a.txt", "*.{md,txt}")
        assert match_glob("src/x/a.ts", "src/**/*.{js,ts}")
        assert not match_glob("src/a.py", "src/**/*.{js,ts}")

    def test_dot_files(self):
        """測試點檔也會被匹配"""
        assert match_glob(".github/notes.md", "**/*.md")

    def test_windows_and_relative_paths(self):
        """測試反斜線與 ./ 前綴"""
        assert match_glob("docs\\a.md", "docs/*.md")
        assert match_glob("./docs/a.md", "docs/*.md")

    def test_negation(self):
        """測試 ! 否定模式"""
        patterns = ["**/*.md", "!docs/**"]
        assert matches_any_pattern("readme.md", patterns)
        assert not matches_any_pattern("docs/a.md", patterns)
        assert not matches_any_pattern("a.txt", patterns)

    def test_only_negative_patterns_match_nothing(self):
        """測試只有否定模式時不命中任何檔案"""
        assert not matches_any_pattern("readme.md", ["!docs/**"])
        assert not matches_any_pattern("readme.md", [])

    def test_reversed_range_never_matches(self):
        """測試反向字元範圍不拋例外，只是不命中"""
        assert not match_glob("docs/a.md", "docs/[z-a]*.md")
        assert match_glob("docs/a.md", "docs/[a-z]*.md")
        assert not match_glob("docs/A.md", "docs/[!A-Z]*.md")

    def test_absolute_paths(self, tmp_path, monkeypatch):
        """測試目前目錄下的絕對路徑以相對路徑比對"""
        monkeypatch.chdir(tmp_path)
        assert match_glob(str(tmp_path / "docs" / "a.md"), "docs/*.md")
        assert not match_glob(str(tmp_path / "src" / "a.md"), "docs/*.md")
        assert match_glob("/elsewhere/node_modules/x.md", "**/node_modules/**")


class TestIgnores:
    """忽略規則"""

    @pytest.mark.parametrize(
        "path",
        [
            ".git/config",
            "pkg/node_modules/lib/readme.md",
            ".env",
            ".env.local",
            "dist/index.md",
            "build/out.md",
            "logs/today.md",
            "app.log",
            ".gitignore",
            ".vscode/settings.md",
        ],
    )
    def test_system_ignores(self, path):
        """測試系統忽略無法被設定覆寫"""
        matcher = ConfigMatcher({"files": ["**/*", "**/.*"], "rules": {"simplified-chars": "error"}})
        assert matcher.is_ignored(path)
        assert matcher.get_rules_for_file(path) == {}

    def test_regular_file_not_ignored(self):
        """測試一般檔案不會被忽略"""
        assert not ConfigMatcher().is_ignored("docs/readme.md")

    def test_ignore_file_patterns(self):
        """測試 .twlintignore 模式"""
        patterns = parse_ignore_file("# comment\n\ndrafts/\nsecret.md\n*.bak\n")
        assert patterns == ["drafts/**", "**/secret.md", "*.bak"]

        matcher = ConfigMatcher(ignore_patterns=patterns)
        assert matcher.is_ignored("drafts/a.md")
        assert matcher.is_ignored("x/y/secret.md")
        assert matcher.is_ignored("notes/a.bak")
        assert not matcher.is_ignored("docs/a.md")

    def test_load_ignore_file(self, tmp_path):
        """測試讀取 .twlintignore"""
        assert load_ignore_file(tmp_path) == []
        (tmp_path / IGNORE_FILE_NAME).write_text("vendor-docs/\n", encoding="utf-8")
        assert load_ignore_file(tmp_path) == ["vendor-docs/**"]

    def test_global_ignore_block(self):
        """測試只有 ignores 的區塊為全域忽略"""
        matcher = ConfigMatcher([{"ignores": ["**/draft-*.md"]}, {"files": ["**/*.md"], "rules": {"mainland-terms": "error"}}])
        assert matcher.is_ignored("docs/draft-1.md")
        assert matcher.get_rules_for_file("docs/draft-1.md") == {}
        assert not matcher.is_ignored("docs/final.md")

    def test_block_ignores_exclude_matching_files(self):
        """測試區塊內的 ignores 會忽略符合該區塊 files 的檔案"""
        matcher = ConfigMatcher([
            {"files": ["**/*.md"], "ignores": ["legacy/**"], "rules": {"mainland-terms": "error"}},
        ])
        assert matcher.applicable_blocks("legacy/a.md") == matcher.blocks[:1]
        assert matcher.get_rules_for_file("legacy/a.md") == {}
        assert matcher.is_ignored("legacy/a.md")
        assert not matcher.is_ignored("legacy/a.txt")


class TestRuleMerging:
    """區塊合併"""

    @pytest.fixture(autouse=True)
    def setup(self):
        self.matcher = ConfigMatcher([
            {"files": ["**/*.md"], "rules": {"mainland-terms": "error"}, "domains": ["software-development", "core"]},
            {"files": ["tests/**"], "rules": {"mainland-terms": "off"}, "domains": ["software-development", "medical"]},
        ])

    def test_later_blocks_override(self):
        """測試後面的區塊覆寫前面的規則"""
        assert self.matcher.get_rules_for_file("docs/a.md") == {
            "simplified-chars": "error",
            "mainland-terms": "error",
        }
        assert self.matcher.get_rules_for_file("tests/a.md")["mainland-terms"] == "off"

    def test_domains_concatenated_and_deduplicated(self):
        """測試詞庫串接後去重，保持首次出現順序"""
        assert self.matcher.get_domains_for_file("tests/a.md") == ["core", "software-development", "medical"]
        assert self.matcher.get_domains_for_file("src/main.py") == ["core"]

    def test_text_without_path_uses_global_blocks(self):
        """測試沒有檔案路徑時只套用未限定 files 的區塊"""
        assert self.matcher.get_rules_for_file(None) == DEFAULT_RULES
        assert self.matcher.get_domains_for_file(None) == ["core"]
