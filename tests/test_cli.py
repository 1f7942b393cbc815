# tests/test_cli.py
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from typer.testing import CliRunner

from propshim.config import Config, TRUST_FLAG_ENV
from propshim_cli.main import app, CONFIG_FILE_NAME

runner = CliRunner()


class TestCli(unittest.TestCase):
    def setUp(self):
        Config.reset()
        self.tmp = tempfile.TemporaryDirectory()
        self.tmp_path = Path(self.tmp.name)
        env = mock.patch.dict(os.environ)
        env.start()
        self.addCleanup(env.stop)
        os.environ.pop(TRUST_FLAG_ENV, None)

    def tearDown(self):
        Config.reset()
        self.tmp.cleanup()

    def test_init_writes_template(self):
        result = runner.invoke(app, ["init", str(self.tmp_path)])
        self.assertEqual(result.exit_code, 0, result.output)
        written = (self.tmp_path / CONFIG_FILE_NAME).read_text(encoding="utf-8")
        self.assertIn("trust_homogeneous_origin: false", written)

    def test_init_refuses_to_overwrite(self):
        (self.tmp_path / CONFIG_FILE_NAME).write_text("props: {}\n", encoding="utf-8")
        result = runner.invoke(app, ["init", str(self.tmp_path)])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("already exists", result.output)

    def test_config_reports_file_value(self):
        path = self.tmp_path / CONFIG_FILE_NAME
        path.write_text("props:\n  trust_homogeneous_origin: true\n", encoding="utf-8")
        result = runner.invoke(app, ["config", "--file", str(path)])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Source: file", result.output)
        self.assertIn("props.trust_homogeneous_origin = true", result.output)

    def test_config_env_override(self):
        path = self.tmp_path / CONFIG_FILE_NAME
        path.write_text("props:\n  trust_homogeneous_origin: true\n", encoding="utf-8")
        os.environ[TRUST_FLAG_ENV] = "off"
        result = runner.invoke(app, ["config", "--file", str(path)])
        self.assertIn("props.trust_homogeneous_origin = false", result.output)
        self.assertIn(TRUST_FLAG_ENV, result.output)

    def test_config_missing_file(self):
        result = runner.invoke(app, ["config", "--file", str(self.tmp_path / "nope.yaml")])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("not found", result.output)


if __name__ == "__main__":
    unittest.main()
