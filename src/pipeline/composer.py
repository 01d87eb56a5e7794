"""Composer: installation, GitHub token check and ``composer install``."""

from __future__ import annotations

import logging
import os
from typing import Dict, Mapping, Optional

import requests

from constants import Constants
from common.errors import ManifestError
from common.http_client import get_json
from common.logging_utils import begin_step
from staging.command import Command
from staging.manifest import Dependency, Manifest
from staging.stager import Stager

logger = logging.getLogger(__name__)


def composer_binary(stager: Stager) -> str:
    return os.path.join(stager.dep_dir, "bin", "composer")


def install_composer(manifest: Manifest, stager: Stager) -> None:
    versions = manifest.all_dependency_versions(Constants.DEP_COMPOSER)
    if len(versions) != 1:
        raise ManifestError(f"expected 1 version of composer, found {len(versions)}")
    begin_step(logger, "Installing composer %s", versions[0])
    manifest.fetch_dependency(Dependency(Constants.DEP_COMPOSER, versions[0]), composer_binary(stager))


def is_token_valid(token: str, session: Optional[requests.Session] = None) -> bool:
    """Ask GitHub whether ``token`` authenticates; any failure counts as invalid."""
    status, _, body = get_json(
        Constants.GITHUB_RATE_LIMIT_URL,
        headers={"Authorization": f"token {token}"},
        session=session,
    )
    logger.debug("Github rate limit (HTTP %s): %s", status, body)
    return isinstance(body, dict) and "resources" in body


def composer_env(stager: Stager, composer_path: Optional[str], base: Mapping[str, str]) -> Dict[str, str]:
    env = dict(base)
    env.update({
        "COMPOSER_NO_INTERACTION": "1",
        "COMPOSER_CACHE_DIR": os.path.join(stager.cache_dir, "composer"),
        "COMPOSER_VENDOR_DIR": os.path.join(stager.build_dir, "vendor"),
        "COMPOSER_BIN_DIR": os.path.join(stager.dep_dir, "php", "bin"),
        "PHPRC": f"{Constants.STAGE_CONFIG_ROOT}/{Constants.PHP_CONF_DEST}",
        "TMPDIR": Constants.STAGE_TMPDIR,
    })
    if composer_path:
        env["COMPOSER"] = composer_path
    return env


def run_composer(
    stager: Stager,
    command: Command,
    composer_path: Optional[str],
    token: str = "",
    environ: Optional[Mapping[str, str]] = None,
    session: Optional[requests.Session] = None,
) -> None:
    begin_step(logger, "Running composer")
    env = composer_env(stager, composer_path, os.environ if environ is None else environ)
    binary = composer_binary(stager)

    if token:
        if is_token_valid(token, session):
            begin_step(logger, "Using custom GitHub OAuth token in $%s", Constants.ENV_COMPOSER_TOKEN)
            command.run(["php", binary, "config", "-g", "github-oauth.github.com", token],
                        cwd=stager.build_dir, env=env)
        else:
            logger.warning("The GitHub OAuth token supplied from $%s is invalid", Constants.ENV_COMPOSER_TOKEN)

    command.run(["php", binary, "install", "--no-progress", "--no-dev"], cwd=stager.build_dir, env=env)
