import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))


class StubLogger:
    def __init__(self) -> None:
        self.events = []

    def debug(self, event: str, **extra):  # pragma: no cover - recorder
        self.events.append(("debug", event, extra))

    def info(self, event: str, **extra):  # pragma: no cover - recorder
        self.events.append(("info", event, extra))

    def warning(self, event: str, **extra):  # pragma: no cover - recorder
        self.events.append(("warning", event, extra))

    def error(self, event: str, **extra):  # pragma: no cover - recorder
        self.events.append(("error", event, extra))

    def event(self, *, event: str, phase: str, ok: bool, **extra):  # pragma: no cover - recorder
        self.events.append(("event", event, phase, ok, extra))

    def names(self):
        return [entry[1] for entry in self.events]


@pytest.fixture
def stub_logger():
    return StubLogger()


@pytest.fixture
def state_dir(tmp_path, monkeypatch):
    path = tmp_path / "state"
    monkeypatch.setenv("ZIPADEEDOODAH_HOME", str(path))
    return path


@pytest.fixture
def project(tmp_path):
    """Small project tree: sources, an empty dir, a log, a hidden file and node_modules."""

    root = tmp_path / "proj"
    (root / "src" / "pkg").mkdir(parents=True)
    (root / "empty").mkdir()
    (root / "node_modules" / "dep").mkdir(parents=True)
    (root / "README.md").write_text("# proj\n", encoding="utf-8")
    (root / "src" / "main.py").write_text("print('hi')\n", encoding="utf-8")
    (root / "src" / "pkg" / "util.py").write_text("X = 1\n", encoding="utf-8")
    (root / "build.log").write_text("noise\n", encoding="utf-8")
    (root / ".env").write_text("SECRET=1\n", encoding="utf-8")
    (root / "node_modules" / "dep" / "index.js").write_text("module.exports = 1\n", encoding="utf-8")
    return root
