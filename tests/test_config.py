"""
Tests for safesftp.config: sftp.json parsing, workspace discovery and
global YAML settings.
"""
import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock


class TestParseContexts(unittest.TestCase):
    """parse_contexts accepts one object or an array of objects."""

    def test_single_object(self):
        from safesftp.config import parse_contexts
        contexts = parse_contexts(json.dumps(
            {"host": "h1", "port": 22, "username": "u", "remotePath": "/srv"}
        ))
        self.assertEqual(len(contexts), 1)
        self.assertEqual(contexts[0].host, "h1")
        self.assertEqual(contexts[0].remote_path, "/srv")
        self.assertIsNone(contexts[0].context)

    def test_array_keeps_order(self):
        from safesftp.config import parse_contexts
        contexts = parse_contexts(json.dumps([
            {"name": "web", "context": "web", "host": "a", "username": "u", "remotePath": "/a"},
            {"name": "api", "context": "api", "host": "b", "username": "u", "remotePath": "/b"},
        ]))
        self.assertEqual([c.name for c in contexts], ["web", "api"])

    def test_port_defaults_to_22(self):
        """Absent or zero port both fall back to 22."""
        from safesftp.config import parse_contexts
        contexts = parse_contexts(json.dumps([
            {"host": "a", "username": "u", "remotePath": "/a"},
            {"host": "b", "port": 0, "username": "u", "remotePath": "/b"},
        ]))
        self.assertEqual([c.port for c in contexts], [22, 22])

    def test_malformed_json_raises(self):
        from safesftp.config import parse_contexts
        from safesftp.errors import ConfigLoadError
        with self.assertRaises(ConfigLoadError):
            parse_contexts("{not json")

    def test_missing_required_key_raises(self):
        from safesftp.config import parse_contexts
        from safesftp.errors import ConfigLoadError
        with self.assertRaises(ConfigLoadError) as cm:
            parse_contexts(json.dumps({"host": "a", "username": "u"}))
        self.assertIn("remotePath", str(cm.exception))

    def test_non_integer_port_raises(self):
        from safesftp.config import parse_contexts
        from safesftp.errors import ConfigLoadError
        with self.assertRaises(ConfigLoadError):
            parse_contexts(json.dumps(
                {"host": "a", "port": "ssh", "username": "u", "remotePath": "/a"}
            ))


class TestRemoteContext(unittest.TestCase):

    def test_server_identity_is_host_port(self):
        from safesftp.config import RemoteContext
        ctx = RemoteContext(host="h", username="u", remote_path="/r", port=2222)
        self.assertEqual(ctx.server_identity, "h:2222")

    def test_same_host_port_share_identity(self):
        from safesftp.config import RemoteContext
        a = RemoteContext(host="h", username="alice", remote_path="/a", name="A")
        b = RemoteContext(host="h", username="bob", remote_path="/b", context="sub")
        self.assertEqual(a.server_identity, b.server_identity)

    def test_label_prefers_name(self):
        from safesftp.config import RemoteContext
        self.assertEqual(RemoteContext("h", "u", "/r", name="prod").label, "prod")
        self.assertEqual(RemoteContext("h", "u", "/r").label, "h")

    def test_context_path_is_normalized(self):
        from safesftp.config import RemoteContext
        ctx = RemoteContext("h", "u", "/r", context="a/../b")
        self.assertEqual(ctx.context_path(Path("/ws")), Path("/ws/b"))
        self.assertEqual(RemoteContext("h", "u", "/r").context_path(Path("/ws")), Path("/ws"))


class TestLoadContexts(unittest.TestCase):
    """load_contexts reads <workspace>/.vscode/sftp.json."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.root = Path(self.tmpdir.name)

    def tearDown(self):
        self.tmpdir.cleanup()

    def _write(self, text):
        p = self.root / ".vscode" / "sftp.json"
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")
        return p

    def test_missing_file_returns_none(self):
        from safesftp.config import load_contexts
        self.assertIsNone(load_contexts(self.root))

    def test_loads_file(self):
        from safesftp.config import load_contexts
        self._write('{"host": "h1", "username": "u", "remotePath": "/srv"}')
        contexts = load_contexts(self.root)
        self.assertEqual(contexts[0].server_identity, "h1:22")

    def test_malformed_file_raises(self):
        from safesftp.config import load_contexts
        from safesftp.errors import ConfigLoadError
        self._write("[{")
        with self.assertRaises(ConfigLoadError):
            load_contexts(self.root)

    def test_find_workspace_root_searches_upward(self):
        from safesftp.config import find_workspace_root
        self._write("[]")
        deep = self.root / "a" / "b"
        deep.mkdir(parents=True)
        self.assertEqual(find_workspace_root(deep), self.root.resolve())

    def test_find_workspace_root_from_file(self):
        from safesftp.config import find_workspace_root
        self._write("[]")
        f = self.root / "x.txt"
        f.write_text("x", encoding="utf-8")
        self.assertEqual(find_workspace_root(f), self.root.resolve())


class TestGlobalSettings(unittest.TestCase):
    """load_global_config + apply_settings"""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        import safesftp.config as cfg
        self._saved = (cfg.CONNECT_TIMEOUT, cfg.POLL_INTERVAL, cfg.STAGING_DIR,
                       cfg.HOST_KEY_POLICY, cfg.SFTP_CONFIG_RELPATH)

    def tearDown(self):
        import safesftp.config as cfg
        (cfg.CONNECT_TIMEOUT, cfg.POLL_INTERVAL, cfg.STAGING_DIR,
         cfg.HOST_KEY_POLICY, cfg.SFTP_CONFIG_RELPATH) = self._saved
        self.tmpdir.cleanup()

    def test_global_config_dir_uses_xdg(self):
        import safesftp.config as cfg
        with mock.patch.dict(os.environ, {"XDG_CONFIG_HOME": self.tmpdir.name}):
            self.assertEqual(cfg.get_global_config_dir(), Path(self.tmpdir.name) / "safesftp")

    def test_load_global_config_absent(self):
        import safesftp.config as cfg
        with mock.patch.dict(os.environ, {"XDG_CONFIG_HOME": self.tmpdir.name}):
            self.assertEqual(cfg.load_global_config(), {})

    def test_load_and_apply(self):
        import safesftp.config as cfg
        d = Path(self.tmpdir.name) / "safesftp"
        d.mkdir()
        (d / "config.yaml").write_text(
            "connect_timeout: 5\n"
            "poll_interval: 0.5\n"
            "host_key_policy: reject\n"
            "config_path: .sftp/config.json\n",
            encoding="utf-8",
        )
        with mock.patch.dict(os.environ, {"XDG_CONFIG_HOME": self.tmpdir.name}):
            cfg.apply_settings(cfg.load_global_config())
        self.assertEqual(cfg.CONNECT_TIMEOUT, 5)
        self.assertEqual(cfg.POLL_INTERVAL, 0.5)
        self.assertEqual(cfg.HOST_KEY_POLICY, "reject")
        self.assertEqual(cfg.get_sftp_config_path(Path("/ws")), Path("/ws/.sftp/config.json"))

    def test_invalid_yaml_raises(self):
        import safesftp.config as cfg
        from safesftp.errors import ConfigLoadError
        d = Path(self.tmpdir.name) / "safesftp"
        d.mkdir()
        (d / "config.yaml").write_text("a: [1, 2\n", encoding="utf-8")
        with mock.patch.dict(os.environ, {"XDG_CONFIG_HOME": self.tmpdir.name}):
            with self.assertRaises(ConfigLoadError):
                cfg.load_global_config()

    def test_unknown_host_key_policy_rejected(self):
        import safesftp.config as cfg
        from safesftp.errors import ConfigLoadError
        with self.assertRaises(ConfigLoadError):
            cfg.apply_settings({"host_key_policy": "trust-me"})


if __name__ == "__main__":
    unittest.main()
