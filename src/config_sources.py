"""Typed readers for the application's declarative build sources.

Two JSON files steer staging: ``.bp-config/options.json`` and
``composer.json``. Each is parsed into a small dataclass whose optional
fields are ``None`` when the key is absent or carries the wrong type.
A missing file is not an error; a malformed one is.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from constants import Constants
from common.errors import ConfigSourceError

logger = logging.getLogger(__name__)


def _opt_str(data: Mapping[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if isinstance(value, str):
        return value
    if value is not None:
        logger.debug("Ignoring %s: expected a string, got %s", key, type(value).__name__)
    return None


def _opt_str_list(data: Mapping[str, Any], key: str) -> Optional[List[str]]:
    value = data.get(key)
    if isinstance(value, list):
        # Non-string members are dropped, the list itself still counts as set.
        return [item for item in value if isinstance(item, str)]
    if value is not None:
        logger.debug("Ignoring %s: expected a list, got %s", key, type(value).__name__)
    return None


@dataclass
class OptionsFile:
    """Recognized keys of ``.bp-config/options.json``."""

    php_version: Optional[str] = None
    php_extensions: Optional[List[str]] = None
    zend_extensions: Optional[List[str]] = None
    webdir: Optional[str] = None
    libdir: Optional[str] = None
    admin_email: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "OptionsFile":
        return cls(
            php_version=_opt_str(data, "PHP_VERSION") or None,
            php_extensions=_opt_str_list(data, "PHP_EXTENSIONS"),
            zend_extensions=_opt_str_list(data, "ZEND_EXTENSIONS"),
            webdir=_opt_str(data, "WEBDIR"),
            libdir=_opt_str(data, "LIBDIR"),
            admin_email=_opt_str(data, "ADMIN_EMAIL"),
        )


@dataclass
class ComposerFile:
    """The parts of ``composer.json`` staging cares about."""

    php_constraint: Optional[str] = None
    requires: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ComposerFile":
        require = data.get("require")
        if not isinstance(require, dict):
            return cls()
        return cls(php_constraint=_opt_str(require, "php") or None, requires=dict(require))


def _load_json_object(path: str) -> Optional[Dict[str, Any]]:
    """Return the parsed object at ``path``, or None when the file does not exist."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except FileNotFoundError:
        logger.debug("File Not Exist: %s", path)
        return None
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        logger.error("Invalid JSON present in %s. Parser said %s", os.path.basename(path), exc)
        raise ConfigSourceError(path, str(exc)) from exc
    if not isinstance(data, dict):
        raise ConfigSourceError(path, f"expected a JSON object, got {type(data).__name__}")
    return data


def load_options(build_dir: str) -> OptionsFile:
    """Read ``<build_dir>/.bp-config/options.json``."""
    path = os.path.join(build_dir, Constants.BP_CONFIG_DIR, Constants.OPTIONS_FILE)
    data = _load_json_object(path)
    return OptionsFile.from_dict(data) if data is not None else OptionsFile()


def locate_composer(build_dir: str, environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Find composer.json, preferring ``$COMPOSER_PATH`` over the build dir root."""
    env = os.environ if environ is None else environ
    found = None
    default_path = os.path.join(build_dir, Constants.COMPOSER_FILE)
    if os.path.isfile(default_path):
        logger.debug("Found composer in build dir")
        found = default_path

    override = env.get(Constants.ENV_COMPOSER_PATH, "")
    logger.debug("COMPOSER_PATH: %s", override)
    if override:
        candidate = os.path.join(build_dir, override, Constants.COMPOSER_FILE)
        if os.path.isfile(candidate):
            logger.debug("Found composer in COMPOSER_PATH")
            found = candidate
    return found


def load_composer(path: Optional[str]) -> ComposerFile:
    """Read composer.json at ``path``; None means there is no composer.json."""
    if not path:
        return ComposerFile()
    data = _load_json_object(path)
    return ComposerFile.from_dict(data) if data is not None else ComposerFile()
