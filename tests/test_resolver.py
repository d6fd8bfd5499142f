"""
Tests for context resolution and remote path computation.
"""
import os
import unittest
from pathlib import Path

from safesftp.config import RemoteContext
from safesftp.operations.resolver import (
    resolve, resolve_or_raise, remote_path_for,
)

WS = os.path.abspath("/ws")


def ctx(remote="/srv", context=None, name=None, host="h1"):
    return RemoteContext(host=host, username="u", remote_path=remote,
                         context=context, name=name)


class TestResolve(unittest.TestCase):

    def test_root_context_scenario(self):
        """{host:h1, remotePath:/srv}, root /ws, /ws/a.txt → /srv/a.txt"""
        match = resolve(os.path.join(WS, "a.txt"), [ctx()], WS)
        self.assertIsNotNone(match)
        self.assertEqual(match.relative, "a.txt")
        self.assertEqual(match.remote_path, "/srv/a.txt")

    def test_first_match_wins_over_longer_prefix(self):
        """List order decides, not prefix length."""
        broad = ctx(remote="/broad", name="broad")
        narrow = ctx(remote="/narrow", context="app", name="narrow")
        local = os.path.join(WS, "app", "x.py")

        self.assertEqual(resolve(local, [broad, narrow], WS).context.name, "broad")
        self.assertEqual(resolve(local, [narrow, broad], WS).context.name, "narrow")

    def test_no_match_returns_none(self):
        self.assertIsNone(resolve(os.path.abspath("/elsewhere/a.txt"), [ctx()], WS))

    def test_sibling_directory_with_shared_prefix_not_matched(self):
        """/ws/app does not cover /ws/app2/..."""
        app = ctx(context="app")
        self.assertIsNone(resolve(os.path.join(WS, "app2", "x.py"), [app], WS))

    def test_nested_relative_path_uses_forward_slashes(self):
        match = resolve(os.path.join(WS, "web", "static", "css", "a.css"),
                        [ctx(remote="/var/www", context="web")], WS)
        self.assertEqual(match.relative, "static/css/a.css")
        self.assertEqual(match.remote_path, "/var/www/static/css/a.css")

    def test_relative_round_trip(self):
        c = ctx(context="sub")
        base = str(c.context_path(Path(WS)))
        for rel in ("a.txt", "d/e/f.txt", ".hidden/x"):
            with self.subTest(rel=rel):
                local = os.path.join(base, *rel.split("/"))
                self.assertEqual(resolve(local, [c], WS).relative, rel)

    def test_context_with_dotdot_is_normalized(self):
        c = ctx(context="a/../b")
        match = resolve(os.path.join(WS, "b", "f.txt"), [c], WS)
        self.assertEqual(match.relative, "f.txt")

    def test_resolve_or_raise(self):
        from safesftp.errors import ConfigMatchError
        with self.assertRaises(ConfigMatchError):
            resolve_or_raise(os.path.abspath("/elsewhere/a.txt"), [ctx()], WS)


class TestRemotePathFor(unittest.TestCase):

    def test_posix_join(self):
        self.assertEqual(remote_path_for(ctx(remote="/srv/"), "a/b.txt"), "/srv/a/b.txt")

    def test_backslashes_normalized(self):
        self.assertEqual(remote_path_for(ctx(remote="/srv"), "a\\b.txt"), "/srv/a/b.txt")


if __name__ == "__main__":
    unittest.main()
