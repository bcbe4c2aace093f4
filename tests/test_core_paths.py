import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from core import paths as core_paths


class CorePathsTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_state_dir_prefers_environment(self) -> None:
        target = self.root / "state"
        with mock.patch.dict(os.environ, {core_paths.STATE_DIR_ENV: str(target)}):
            resolved = core_paths.resolve_state_dir()
        self.assertEqual(resolved, target)
        self.assertTrue(target.is_dir())

    def test_state_dir_falls_back_to_local_appdata(self) -> None:
        env = {"LOCALAPPDATA": str(self.root / "appdata")}
        with mock.patch.dict(os.environ, env), mock.patch.dict(os.environ, {core_paths.STATE_DIR_ENV: ""}):
            resolved = core_paths.resolve_state_dir()
        self.assertEqual(resolved, self.root / "appdata" / "zipadeedoodah")

    def test_lock_path_is_stable_per_root(self) -> None:
        first = core_paths.lock_path_for(self.root, self.root / "proj")
        again = core_paths.lock_path_for(self.root, self.root / "proj" / ".." / "proj")
        other = core_paths.lock_path_for(self.root, self.root / "other")
        self.assertEqual(first, again)
        self.assertNotEqual(first, other)
        self.assertEqual(first.parent, self.root / "locks")
        self.assertEqual(first.suffix, ".lock")

    def test_relative_to_root(self) -> None:
        project = self.root / "proj"
        self.assertEqual(core_paths.relative_to_root(project / "a" / "b.txt", project), "a/b.txt")
        self.assertIsNone(core_paths.relative_to_root(self.root / "elsewhere", project))
        self.assertIsNone(core_paths.relative_to_root(project, project))


if __name__ == "__main__":
    unittest.main()
