import pytest

from archive.api import ArchiveService
from archive.errors import FilesystemError
from core.options import Options
from core.paths import lock_path_for


def _service(project, state_dir, **option_changes):
    options = Options().replace(exclude=("*.log", "node_modules/**"), **option_changes)
    return ArchiveService(project, options, state_dir=state_dir)


def test_create_names_archive_from_template(project, state_dir) -> None:
    service = _service(project, state_dir, output="../out/<cwd>_snap")
    destination, stats = service.create("first")
    assert destination == (project.parent / "out" / "proj_snap - first.tar.gz").resolve()
    assert stats.file_count == 3
    assert service.read_comment(destination) == "first"
    assert not lock_path_for(state_dir, project).exists()


def test_archives_listed_from_archive_directory(project, state_dir) -> None:
    service = _service(project, state_dir, output="../<cwd>_one")
    destination, _ = service.create()
    assert [info.path for info in service.list_archives()] == [destination]
    assert service.verify(destination)["entries"] == 6


def test_concurrent_operation_is_refused(project, state_dir) -> None:
    service = _service(project, state_dir, output="../<cwd>_locked")
    destination, _ = service.create()
    lock = lock_path_for(state_dir, project)
    lock.parent.mkdir(parents=True, exist_ok=True)
    lock.write_text("{}", encoding="utf-8")
    (project / "extra.txt").write_text("", encoding="utf-8")

    with pytest.raises(FilesystemError, match="Another operation"):
        service.restore(destination)
    assert (project / "extra.txt").exists()


def test_restore_keeps_archives_stored_inside_project(project, state_dir) -> None:
    service = _service(project, state_dir, output="backups/<cwd>", archive_directory="backups")
    destination, _ = service.create()
    (project / "backups" / "older.tar.gz").write_bytes(b"old")
    (project / "stray.txt").write_text("", encoding="utf-8")

    result = service.restore(destination)

    assert result.deleted == ["stray.txt"]
    assert destination.exists()
    assert (project / "backups" / "older.tar.gz").exists()


def test_restore_keeps_archives_in_project_root(project, state_dir) -> None:
    service = _service(project, state_dir, output="<cwd>_root", archive_directory=".")
    destination, _ = service.create()
    (project / "other.tar.gz").write_bytes(b"x")

    result = service.restore(destination)

    assert result.deleted == []
    assert destination.exists()
    assert (project / "other.tar.gz").exists()


def test_extract_some_and_delete(project, state_dir) -> None:
    service = _service(project, state_dir, output="../<cwd>_sel")
    destination, _ = service.create()
    (project / "README.md").write_text("changed", encoding="utf-8")
    result = service.extract_some(destination, ["README.md"])
    assert result.extracted == ["README.md"]
    assert (project / "README.md").read_text(encoding="utf-8") == "# proj\n"
    assert service.delete(destination) is True
    assert service.list_archives() == []
