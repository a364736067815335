# file: module0_common/config.py
"""
Configuration loading and validation.

Configuration is a nested dictionary. Hard-coded defaults are always
present; a YAML file may override any subset of keys.
"""

import copy
import logging
import os
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "DENDEC_CONFIG"

DEFAULT_CONFIG: Dict[str, Any] = {
    "crypto": {
        "kdf": {
            "time_cost": 3,
            "memory_cost": 65536,  # KiB (64 MiB)
            "parallelism": 1,
            "hash_len": 40,
        },
        "security": {
            "min_password_length": 1,
            "bind_header": True,
        },
    },
    "format": {
        "magic": "DNDC",
        "version": 1,
        "alphabet": "ATGC",
        "separators": "-",
        "group": None,
    },
    "wrap": {
        "suffix": ".dna",
        "sample_size": 512,
        "binary_threshold": 0.10,
        "binary_extensions": [
            # images
            "png", "jpg", "jpeg", "gif", "bmp", "ico", "webp", "tiff", "svg",
            # archives
            "zip", "tar", "gz", "bz2", "xz", "zst", "7z", "rar",
            # compiled
            "wasm", "bin", "exe", "dll", "so", "dylib", "a", "o",
            # documents
            "pdf", "doc", "docx", "xls", "xlsx", "ppt", "pptx",
            # media
            "mp3", "mp4", "wav", "ogg", "flac", "avi", "mkv", "mov",
            # other
            "db", "sqlite", "pyc", "class",
        ],
        "excluded_dirs": [
            ".git", ".hg", ".svn", "target", "node_modules",
            "__pycache__", ".venv", "build", "dist",
        ],
        "fingerprint": "sha256",
    },
    "system": {
        "verbose": False,
    },
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge `override` into a copy of `base`."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from a YAML file merged over the defaults.

    Args:
        config_path: Path to a YAML file. If None, the DENDEC_CONFIG
                     environment variable is consulted; if that is unset
                     too, the defaults are returned.

    Returns:
        Validated configuration dictionary

    Raises:
        ConfigurationError: If the file cannot be read or parsed, or the
                            merged configuration is invalid
    """
    if config_path is None:
        config_path = os.environ.get(CONFIG_ENV_VAR)

    if config_path is None:
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            user_config = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {config_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if user_config is None:
        user_config = {}
    if not isinstance(user_config, dict):
        raise ConfigurationError(
            f"Config file {config_path} must contain a mapping, got {type(user_config).__name__}"
        )

    logger.debug("Loaded configuration overrides from %s", config_path)
    config = _deep_merge(DEFAULT_CONFIG, user_config)
    validate_config(config)
    return config


def merge_config(overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Return the defaults with `overrides` merged in, validated."""
    config = _deep_merge(DEFAULT_CONFIG, overrides)
    validate_config(config)
    return config


def resolve_config(config: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Return `config` itself, or the default configuration when None."""
    if config is None:
        return load_config()
    return config


def validate_config(config: Dict[str, Any]) -> None:
    """
    Check a configuration dictionary for values the pipeline cannot use.

    Raises:
        ConfigurationError: On the first invalid value found
    """
    try:
        kdf = config["crypto"]["kdf"]
        fmt = config["format"]
        wrap = config["wrap"]
    except KeyError as e:
        raise ConfigurationError(f"Missing required config key: {e}") from e

    if kdf["hash_len"] < 40:
        raise ConfigurationError(
            f"crypto.kdf.hash_len must be at least 40, got {kdf['hash_len']}"
        )
    if kdf["parallelism"] < 1 or kdf["time_cost"] < 1:
        raise ConfigurationError("crypto.kdf time_cost and parallelism must be >= 1")

    alphabet = fmt["alphabet"]
    if not isinstance(alphabet, str) or len(alphabet) != 4 or len(set(alphabet)) != 4:
        raise ConfigurationError(
            f"format.alphabet must be 4 distinct characters, got {alphabet!r}"
        )
    if not alphabet.isascii() or any(c.isspace() for c in alphabet):
        raise ConfigurationError("format.alphabet must be printable ASCII")
    if any(c in alphabet for c in fmt.get("separators") or ""):
        raise ConfigurationError("format.separators must not overlap the alphabet")

    magic = fmt["magic"]
    if not isinstance(magic, str) or len(magic) != 4 or not magic.isascii():
        raise ConfigurationError(f"format.magic must be 4 ASCII characters, got {magic!r}")
    if not 0 <= fmt["version"] <= 255:
        raise ConfigurationError(f"format.version must fit in one byte, got {fmt['version']}")

    group = fmt.get("group")
    if group is not None and group < 0:
        raise ConfigurationError(f"format.group must be >= 0, got {group}")

    if not 0.0 <= wrap["binary_threshold"] <= 1.0:
        raise ConfigurationError(
            f"wrap.binary_threshold must be in [0, 1], got {wrap['binary_threshold']}"
        )
    if wrap["sample_size"] <= 0:
        raise ConfigurationError(f"wrap.sample_size must be > 0, got {wrap['sample_size']}")
    if not wrap["suffix"].startswith(".") or len(wrap["suffix"]) < 2:
        raise ConfigurationError(f"wrap.suffix must look like '.ext', got {wrap['suffix']!r}")
