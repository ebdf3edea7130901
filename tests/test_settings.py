"""
Tests for lsp_update.settings — Bundler configuration layers.
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import tempfile
import unittest

from lsp_update.context import ProjectContext
from lsp_update.errors import GemfileNotFound, SettingsError
from lsp_update.settings import (
    BundlerSettings,
    global_config_path,
    key_for,
    load_config_file,
    to_env_value,
)


def make_context(root: Path, gemfile: bool = True) -> ProjectContext:
    return ProjectContext(
        project_root=root,
        custom_dir=root / ".ruby-lsp",
        gemfile=root / "Gemfile" if gemfile else None,
        gemfile_name="Gemfile",
        custom_gemfile=root / ".ruby-lsp" / "Gemfile",
    )


class TestKeyFor(unittest.TestCase):
    """Tests for key_for()."""

    def test_simple(self):
        self.assertEqual(key_for("path"), "BUNDLE_PATH")

    def test_already_prefixed(self):
        self.assertEqual(key_for("BUNDLE_JOBS"), "BUNDLE_JOBS")

    def test_dots_and_dashes(self):
        self.assertEqual(key_for("gems.example-host.com"), "BUNDLE_GEMS__EXAMPLE___HOST__COM")

    def test_mixed_case(self):
        self.assertEqual(key_for("Without"), "BUNDLE_WITHOUT")


class TestToEnvValue(unittest.TestCase):
    """Tests for to_env_value()."""

    def test_list_joined(self):
        self.assertEqual(to_env_value(["development", "test"]), "development:test")

    def test_bool(self):
        self.assertEqual(to_env_value(True), "true")
        self.assertEqual(to_env_value(False), "false")

    def test_int(self):
        self.assertEqual(to_env_value(4), "4")

    def test_string(self):
        self.assertEqual(to_env_value("vendor/bundle"), "vendor/bundle")


class TestGlobalConfigPath(unittest.TestCase):
    """Tests for global_config_path()."""

    def test_user_config(self):
        self.assertEqual(
            global_config_path({"BUNDLE_USER_CONFIG": "/etc/bundle.yml"}),
            Path("/etc/bundle.yml"),
        )

    def test_user_home(self):
        self.assertEqual(
            global_config_path({"BUNDLE_USER_HOME": "/opt/bundle"}),
            Path("/opt/bundle/config"),
        )

    def test_default(self):
        self.assertEqual(global_config_path({}), Path.home() / ".bundle" / "config")


class SettingsTestCase(unittest.TestCase):
    """Scratch project with an isolated global config location."""

    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.root = Path(tmp.name).resolve()
        self.global_config = self.root / "global" / "config"
        self.environ = {"BUNDLE_USER_CONFIG": str(self.global_config)}

    def write(self, path: Path, text: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)


class TestLoadConfigFile(SettingsTestCase):
    """Tests for load_config_file()."""

    def test_missing_file(self):
        self.assertEqual(load_config_file(self.root / "missing"), {})

    def test_reads_bundler_config(self):
        path = self.root / "config"
        self.write(path, '---\nBUNDLE_PATH: "vendor/bundle"\nBUNDLE_JOBS: "4"\n')
        self.assertEqual(
            load_config_file(path),
            {"BUNDLE_PATH": "vendor/bundle", "BUNDLE_JOBS": "4"},
        )

    def test_empty_file(self):
        path = self.root / "config"
        self.write(path, "")
        self.assertEqual(load_config_file(path), {})

    def test_invalid_yaml(self):
        path = self.root / "config"
        self.write(path, "BUNDLE_PATH: [unclosed\n")
        with self.assertRaises(SettingsError):
            load_config_file(path)

    def test_not_a_mapping(self):
        path = self.root / "config"
        self.write(path, "- one\n- two\n")
        with self.assertRaises(SettingsError):
            load_config_file(path)


class TestBundlerSettings(SettingsTestCase):
    """Tests for BundlerSettings."""

    def test_precedence(self):
        self.write(self.global_config, 'BUNDLE_JOBS: "2"\nBUNDLE_RETRY: "5"\nBUNDLE_PATH: "global"\n')
        self.write(self.root / ".bundle" / "config", 'BUNDLE_PATH: "local"\n')
        environ = dict(self.environ, BUNDLE_JOBS="8", BUNDLE_PATH="env", HOME="/home/x")

        settings = BundlerSettings.for_context(make_context(self.root), environ).all()

        self.assertEqual(settings["BUNDLE_PATH"], "local")
        self.assertEqual(settings["BUNDLE_JOBS"], "8")
        self.assertEqual(settings["BUNDLE_RETRY"], "5")
        self.assertNotIn("HOME", settings)

    def test_array_values_joined(self):
        self.write(self.root / ".bundle" / "config", "BUNDLE_WITHOUT:\n  - development\n  - test\n")
        settings = BundlerSettings.for_context(make_context(self.root), self.environ).all()
        self.assertEqual(settings["BUNDLE_WITHOUT"], "development:test")

    def test_project_bundle_dir_without_gemfile(self):
        self.write(self.root / ".bundle" / "config", 'BUNDLE_JOBS: "3"\n')
        settings = BundlerSettings.for_context(make_context(self.root, gemfile=False), self.environ)
        self.assertEqual(settings.all()["BUNDLE_JOBS"], "3")

    def test_no_bundle_dir_and_no_gemfile(self):
        with self.assertRaises(GemfileNotFound):
            BundlerSettings.for_context(make_context(self.root, gemfile=False), self.environ)

    def test_falls_back_to_gemfile_directory(self):
        ctx = make_context(self.root)
        settings = BundlerSettings.for_context(ctx, self.environ)
        self.assertEqual(settings.local_dir, self.root / ".bundle")

    def test_bundle_app_config(self):
        environ = dict(self.environ, BUNDLE_APP_CONFIG="custom_config")
        settings = BundlerSettings.for_context(make_context(self.root), environ)
        self.assertEqual(settings.local_dir, self.root / "custom_config")

    def test_malformed_local_config(self):
        self.write(self.root / ".bundle" / "config", "just a string\n")
        settings = BundlerSettings.for_context(make_context(self.root), self.environ)
        with self.assertRaises(SettingsError):
            settings.all()


if __name__ == "__main__":
    unittest.main()
