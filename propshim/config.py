# propshim/config.py
from __future__ import annotations
import importlib
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional
import yaml

logger = logging.getLogger(__name__)

TRUST_FLAG_PATH = "props.trust_homogeneous_origin"
TRUST_FLAG_ENV = "PROPSHIM_TRUST_HOMOGENEOUS_ORIGIN"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


class Config:
    """
    Singleton config loader that supports:
      - an embedded config module (default name: _propshim_config, attribute: CONFIG)
      - a fallback YAML file (propshim.yaml)

    Usage:
        cfg = Config()  # prefers embedded if available, else loads propshim.yaml
        trust = cfg.get_nested("props.trust_homogeneous_origin", False)
        cfg.reload()    # re-read embedded/file (useful in dev)

    Parameters:
      config_file: path to YAML config (relative or absolute). Attempts sensible fallbacks.
      prefer_embedded: when True (default) try embedded module first, otherwise check file first.
      embedded_module_name: module name to import when looking for embedded config.
    """

    _instance: Optional["Config"] = None

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)
        return cls._instance

    def __init__(
        self,
        config_file: str = "propshim.yaml",
        prefer_embedded: bool = True,
        embedded_module_name: str = "_propshim_config",
    ):
        # initialize only once
        if getattr(self, "_initialized", False):
            return

        self._initialized = True
        self.config_file_arg = config_file
        self.prefer_embedded = bool(prefer_embedded)
        self.embedded_module_name = embedded_module_name

        self._config: Dict[str, Any] = {}
        self._source: Optional[str] = None  # 'embedded' or 'file' or None

        self._resolved_config_path: Optional[Path] = self._resolve_config_path(config_file)

        self.reload()

    @classmethod
    def reset(cls) -> None:
        """Forget the singleton so the next Config() re-reads everything."""
        cls._instance = None

    # ----- public API -----
    def reload(self, prefer_embedded: Optional[bool] = None) -> None:
        """
        Reload the configuration. If prefer_embedded is provided, it overrides the instance preference
        just for this reload.
        """
        if prefer_embedded is None:
            prefer = self.prefer_embedded
        else:
            prefer = bool(prefer_embedded)

        if prefer:
            loaded = self._try_load_embedded() or self._try_load_file()
        else:
            loaded = self._try_load_file() or self._try_load_embedded()

        if not loaded:
            self._source = None
            self._config = {}
        logger.debug("Config loaded: source=%s keys=%s", self._source, list(self._config.keys()))

    def as_dict(self) -> Dict[str, Any]:
        """Return the loaded configuration as a dict (may be empty)."""
        return dict(self._config)

    def get(self, key: str, default: Any = None) -> Any:
        """Shallow lookup in the top-level config dict."""
        return self._config.get(key, default)

    def get_nested(self, path: str, default: Any = None, sep: str = ".") -> Any:
        """
        Lookup nested keys using dot-path (e.g. "props.trust_homogeneous_origin").
        Returns default if any step is missing.
        """
        cur = self._config
        if not path:
            return default
        for part in path.split(sep):
            if not isinstance(cur, dict):
                return default
            if part in cur:
                cur = cur[part]
            else:
                return default
        return cur

    @property
    def is_embedded(self) -> bool:
        """True if the currently loaded config came from the embedded module."""
        return self._source == "embedded"

    @property
    def source(self) -> Optional[str]:
        """Return 'embedded'|'file'|None depending on where config came from."""
        return self._source

    @property
    def resolved_config_path(self) -> Optional[Path]:
        """If a filesystem config was resolved, return its Path, otherwise None."""
        return self._resolved_config_path

    # ----- internal helpers -----
    def _resolve_config_path(self, config_file: str) -> Optional[Path]:
        """
        Try to resolve the YAML config path:
          1. config_file is absolute and exists
          2. relative to the package's parent directory (project root)
          3. relative to the package directory
          4. relative to cwd
        """
        candidate = Path(config_file)
        if candidate.is_absolute():
            return candidate.resolve() if candidate.exists() else None

        here = Path(__file__).resolve().parent
        for base in (here.parent, here, Path.cwd()):
            p = (base / config_file).resolve()
            if p.exists():
                return p
        return None

    def _try_load_embedded(self) -> bool:
        """
        Try to import the embedded module and fetch CONFIG. Returns True on success.
        """
        try:
            module = importlib.import_module(self.embedded_module_name)
        except ModuleNotFoundError:
            return False
        except Exception as e:
            logger.warning("Could not import embedded config %s: %s", self.embedded_module_name, e)
            return False

        cfg = getattr(module, "CONFIG", None)
        if cfg is None:
            return False
        try:
            self._config = dict(cfg)
        except (TypeError, ValueError):
            logger.warning("Embedded config %s.CONFIG is not a mapping; ignoring", self.embedded_module_name)
            return False
        self._source = "embedded"
        return True

    def _try_load_file(self) -> bool:
        """
        Try to load YAML file from resolved path. Returns True on success.
        """
        if not self._resolved_config_path:
            return False
        try:
            with self._resolved_config_path.open("r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh)
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Could not read config file %s: %s", self._resolved_config_path, e)
            return False

        if data is None:
            data = {}
        if isinstance(data, dict):
            self._config = data
        else:
            # YAML parsed but not dict -> store raw under a key
            self._config = {"__root__": data}
        self._source = "file"
        return True


def get_config(*args, **kwargs) -> Config:
    """
    Convenience factory that returns the singleton Config instance.
    Arguments forwarded to Config() only on the first call.
    """
    return Config(*args, **kwargs)


def parse_flag(value: Any, default: bool = False) -> bool:
    """Interpret a YAML/env value as a boolean; unrecognised values give ``default``."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUTHY:
            return True
        if lowered in _FALSY:
            return False
    if value is not None:
        logger.warning("Unrecognised boolean config value %r; using %s", value, default)
    return default


def trust_flag_from_config(config: Optional[Config] = None) -> bool:
    """
    The configured trust-homogeneous-origin value. The environment variable
    wins over the config file.
    """
    env_value = os.environ.get(TRUST_FLAG_ENV)
    if env_value is not None:
        return parse_flag(env_value)
    cfg = config if config is not None else get_config()
    return parse_flag(cfg.get_nested(TRUST_FLAG_PATH, False))
