from archive.patterns import is_excluded, is_included, matches, normalize_path


def test_exclude_wins_over_include() -> None:
    assert matches("a.log", "**/*")
    assert matches("a.log", "*.log")
    assert not is_included("a.log", ["**/*"], ["*.log"])
    assert is_included("a.txt", ["**/*"], ["*.log"])


def test_empty_pattern_lists() -> None:
    assert not is_included("a.txt", [], [])
    assert is_included("a.txt", ["*.txt"], [])
    assert not is_excluded("a.txt", [])


def test_backslash_paths_are_normalized() -> None:
    assert normalize_path("src\\pkg\\util.py") == "src/pkg/util.py"
    assert normalize_path("./src/main.py") == "src/main.py"
    assert matches("src\\pkg\\util.py", "src/**/*.py")


def test_globstar_and_character_classes() -> None:
    assert matches("src/pkg/util.py", "src/**")
    assert matches("src/", "src/**")
    assert matches("node_modules/", "node_modules/**")
    assert matches("node_modules/dep/index.js", "node_modules/**")
    assert not matches("lib/node_modules.txt", "node_modules/**")
    assert matches("file1.txt", "file[0-9].txt")
    assert not matches("fileA.txt", "file[0-9].txt")
    assert matches("a.c", "?.c")
    assert not matches("ab.c", "?.c")


def test_star_stays_within_one_segment() -> None:
    assert matches("run.log", "*.log")
    assert not matches("logs/deep/run.log", "*.log")
    assert matches("logs/deep/run.log", "**/*.log")
    assert matches("src/", "*")
    assert not matches("src/main.py", "*")
    assert not is_included("docs/x.md", ["*.md"], [])
    assert is_included("README.md", ["*.*"], [])
    assert not is_included("src/main.py", ["*.*"], [])


def test_bare_directory_pattern_does_not_cover_contents() -> None:
    assert matches("src/", "src")
    assert not matches("src/a/b.py", "src")
    assert matches("src/", "src/")
    assert not matches("src", "src/")


def test_gitignore_syntax_is_literal() -> None:
    assert matches("#notes", "#notes")
    assert matches("!important", "!important")
    assert not matches("a", "!a")


def test_dotfiles_need_flag_or_explicit_pattern() -> None:
    assert not matches(".env", "**/*")
    assert not matches("config/.secrets/key", "**/*")
    assert matches(".env", "**/*", match_dotfiles=True)
    assert matches(".github/workflows/ci.yml", ".github/**")
    assert matches(".env", ".*")


def test_excludes_always_see_dotfiles() -> None:
    assert is_excluded(".git/config", [".git/**"])
    assert is_excluded(".git/", [".git/**"])
    assert not is_included(".git/config", ["**/*"], [".git/**"], match_dotfiles=True)
