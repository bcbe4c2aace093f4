from archive.listing import traversal_key
from archive.reconcile import deletion_order, diff, plan_deletions, plan_scoped_deletions


def _position(order, path):
    return order.index(path)


def test_diff_is_set_difference_children_first() -> None:
    live = ["a/", "a/b/", "a/b/c.txt", "a/d.txt", "e.txt"]
    archive = {"a/", "a/d.txt"}
    result = diff(live, archive)
    assert set(result) == {"a/b/", "a/b/c.txt", "e.txt"}
    assert len(result) == len(set(result))
    assert _position(result, "a/b/c.txt") < _position(result, "a/b/")


def test_diff_deduplicates() -> None:
    assert diff(["x", "x", "y/"], set()) == ["y/", "x"]


def test_diff_of_identical_sets_is_empty() -> None:
    live = ["a/", "a/b.txt"]
    assert diff(live, set(live)) == []


def test_deletion_order_puts_descendants_before_ancestors() -> None:
    ordered = deletion_order(["src/", "src/pkg/util.py", "src/pkg/", "src/pkg/util.py", "z.txt"])
    assert ordered == ["z.txt", "src/pkg/util.py", "src/pkg/", "src/"]
    assert ordered == sorted(set(ordered), key=traversal_key, reverse=True)


def test_plan_deletions_skips_excluded_and_hidden(project) -> None:
    archive_entries = ["README.md", "src/main.py"]
    plan = plan_deletions(project, archive_entries, ["*.log", "node_modules/**"])
    # src/ is implied by src/main.py so it stays.
    assert plan == ["src/pkg/util.py", "src/pkg/", "empty/"]


def test_plan_deletions_keeps_directories_holding_excluded_files(tmp_path) -> None:
    (tmp_path / "build").mkdir()
    (tmp_path / "build" / "out.log").write_text("x", encoding="utf-8")
    (tmp_path / "build" / "tmp.o").write_text("x", encoding="utf-8")
    plan = plan_deletions(tmp_path, [], ["**/*.log"])
    assert plan == ["build/tmp.o"]


def test_plan_deletions_respects_protected_paths(tmp_path) -> None:
    (tmp_path / "backups").mkdir()
    (tmp_path / "backups" / "old.tar.gz").write_bytes(b"x")
    (tmp_path / "stray.txt").write_text("x", encoding="utf-8")
    plan = plan_deletions(tmp_path, [], [], protected=["backups/"])
    assert plan == ["stray.txt"]


def test_plan_deletions_with_dotfiles(project) -> None:
    entries = ["README.md", "build.log", "empty/", "src/", "src/main.py", "src/pkg/", "src/pkg/util.py"]
    assert plan_deletions(project, entries, ["node_modules/**"]) == []
    assert plan_deletions(project, entries, ["node_modules/**"], match_dotfiles=True) == [".env"]


def test_scoped_plan_stays_inside_selection(project) -> None:
    (project / "src" / "extra.py").write_text("", encoding="utf-8")
    (project / "outside.txt").write_text("", encoding="utf-8")
    entries = ["README.md", "src/", "src/main.py", "src/pkg/", "src/pkg/util.py"]
    plan = plan_scoped_deletions(project, ["src/"], entries, [])
    assert plan == ["src/extra.py"]


def test_scoped_plan_ignores_missing_and_file_selections(project) -> None:
    entries = ["gone/", "gone/a.txt", "README.md"]
    assert plan_scoped_deletions(project, ["gone/", "README.md"], entries, []) == []


def test_scoped_plan_unions_and_deduplicates(project) -> None:
    (project / "src" / "pkg" / "new.py").write_text("", encoding="utf-8")
    entries = ["src/", "src/main.py", "src/pkg/"]
    plan = plan_scoped_deletions(project, ["src/", "src/pkg/"], entries, [])
    assert plan == ["src/pkg/util.py", "src/pkg/new.py"]
