# tests/test_config.py
import os
import sys
import tempfile
import types
import unittest
from pathlib import Path
from unittest import mock

from propshim import configure, trust_homogeneous_origin, set_trust_homogeneous_origin
from propshim.config import Config, TRUST_FLAG_ENV, get_config, parse_flag, trust_flag_from_config


class ConfigTestCase(unittest.TestCase):
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
        set_trust_homogeneous_origin(False)
        self.tmp.cleanup()

    def write_yaml(self, text, name="propshim.yaml"):
        path = self.tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    def load(self, path, **kwargs):
        kwargs.setdefault("prefer_embedded", False)
        return Config(config_file=str(path), **kwargs)


class TestConfigLoading(ConfigTestCase):
    def test_singleton(self):
        first = self.load(self.write_yaml("a: 1\n"))
        self.assertIs(get_config(), first)
        self.assertIs(Config(), first)

    def test_file_source(self):
        path = self.write_yaml("props:\n  trust_homogeneous_origin: true\n")
        cfg = self.load(path)
        self.assertEqual(cfg.source, "file")
        self.assertFalse(cfg.is_embedded)
        self.assertEqual(cfg.resolved_config_path, path.resolve())
        self.assertIs(cfg.get_nested("props.trust_homogeneous_origin"), True)
        self.assertEqual(cfg.get_nested("props.missing", "dflt"), "dflt")
        self.assertEqual(cfg.get("props"), {"trust_homogeneous_origin": True})

    def test_missing_file(self):
        cfg = self.load(self.tmp_path / "absent.yaml")
        self.assertIsNone(cfg.source)
        self.assertEqual(cfg.as_dict(), {})

    def test_invalid_yaml_does_not_raise(self):
        cfg = self.load(self.write_yaml("props: [unterminated\n"))
        self.assertIsNone(cfg.source)
        self.assertEqual(cfg.as_dict(), {})

    def test_non_mapping_yaml(self):
        cfg = self.load(self.write_yaml("- one\n- two\n"))
        self.assertEqual(cfg.get("__root__"), ["one", "two"])

    def test_empty_file(self):
        cfg = self.load(self.write_yaml(""))
        self.assertEqual(cfg.source, "file")
        self.assertEqual(cfg.as_dict(), {})

    def test_embedded_preferred(self):
        module = types.ModuleType("_propshim_test_embedded")
        module.CONFIG = {"props": {"trust_homogeneous_origin": "yes"}}
        with mock.patch.dict(sys.modules, {"_propshim_test_embedded": module}):
            cfg = Config(
                config_file=str(self.write_yaml("props: {trust_homogeneous_origin: false}\n")),
                embedded_module_name="_propshim_test_embedded",
            )
        self.assertTrue(cfg.is_embedded)
        self.assertTrue(trust_flag_from_config(cfg))

    def test_reload_switches_preference(self):
        module = types.ModuleType("_propshim_test_embedded")
        module.CONFIG = {"origin": "embedded"}
        with mock.patch.dict(sys.modules, {"_propshim_test_embedded": module}):
            cfg = Config(
                config_file=str(self.write_yaml("origin: file\n")),
                embedded_module_name="_propshim_test_embedded",
            )
            self.assertEqual(cfg.get("origin"), "embedded")
            cfg.reload(prefer_embedded=False)
            self.assertEqual(cfg.get("origin"), "file")


class TestTrustFlagConfig(ConfigTestCase):
    def test_parse_flag(self):
        self.assertTrue(parse_flag("On"))
        self.assertTrue(parse_flag(1))
        self.assertFalse(parse_flag("off"))
        self.assertFalse(parse_flag(None))
        self.assertTrue(parse_flag("maybe", default=True))

    def test_default_off(self):
        cfg = self.load(self.tmp_path / "absent.yaml")
        self.assertFalse(configure(cfg))
        self.assertFalse(trust_homogeneous_origin())

    def test_configure_from_file(self):
        cfg = self.load(self.write_yaml("props:\n  trust_homogeneous_origin: true\n"))
        self.assertTrue(configure(cfg))
        self.assertTrue(trust_homogeneous_origin())

    def test_env_overrides_file(self):
        cfg = self.load(self.write_yaml("props:\n  trust_homogeneous_origin: true\n"))
        os.environ[TRUST_FLAG_ENV] = "0"
        self.assertFalse(trust_flag_from_config(cfg))
        os.environ[TRUST_FLAG_ENV] = "true"
        self.assertTrue(configure(cfg))


if __name__ == "__main__":
    unittest.main()
