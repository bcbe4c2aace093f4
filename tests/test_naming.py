import os
from datetime import datetime

import pytest

from archive.errors import ValidationError
from archive.naming import format_timestamp, list_archives, render_output_name


def test_template_substitution() -> None:
    name = render_output_name(
        "../<cwd>_<timestamp>",
        cwd_name="proj",
        timestamp="2024-01-01_00-00-00",
        version="1.0.0",
        suffix="",
    )
    assert name == "../proj_2024-01-01_00-00-00"


def test_comment_suffix_and_extension() -> None:
    name = render_output_name(
        "<cwd>-v<version>",
        cwd_name="proj",
        timestamp="t",
        version="1.2.3",
        comment="  before refactor ",
    )
    assert name == "proj-v1.2.3 - before refactor.tar.gz"


def test_every_occurrence_is_replaced() -> None:
    name = render_output_name("<cwd>/<cwd>", cwd_name="p", timestamp="t", version="v", comment="")
    assert name == "p/p.tar.gz"


def test_empty_template_is_rejected() -> None:
    with pytest.raises(ValidationError):
        render_output_name("  ", cwd_name="p", timestamp="t", version="v")


def test_format_timestamp() -> None:
    moment = datetime(2024, 1, 1, 0, 0, 0)
    assert format_timestamp("%Y-%m-%d_%H-%M-%S", moment) == "2024-01-01_00-00-00"
    with pytest.raises(ValidationError):
        format_timestamp("", moment)


def test_list_archives_newest_first(tmp_path) -> None:
    for name, mtime in (("a.tar.gz", 100), ("b.tar.gz", 300), ("c.tar.gz", 200)):
        path = tmp_path / name
        path.write_bytes(b"x")
        os.utime(path, (mtime, mtime))
    (tmp_path / "notes.txt").write_text("", encoding="utf-8")
    (tmp_path / "dir.tar.gz").mkdir()

    names = [info.name for info in list_archives(tmp_path)]
    assert names == ["b.tar.gz", "c.tar.gz", "a.tar.gz"]
    assert list_archives(tmp_path / "missing") == []
