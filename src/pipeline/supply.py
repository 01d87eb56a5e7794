"""Supply phase: resolve, install and configure PHP and HTTPD.

Steps run strictly in order; each later step reads what the earlier ones
decided or left on disk. The first failing step stops the run and is
reported as ``"<phase>: <cause>"``.
"""

from __future__ import annotations

import logging
import os
import shutil
import stat
from typing import Callable, List, Mapping, Optional, Tuple

import requests

from constants import Constants
from common.errors import BuildpackError, StepError
from common.logging_utils import begin_step
from config_sources import ComposerFile, OptionsFile, load_composer, load_options, locate_composer
from extensions import ExtensionSet, aggregate
from staging.command import Command
from staging.manifest import Dependency, Manifest
from staging.stager import Stager
from templating.context import LayoutSettings, build_contexts, run_paths, stage_paths
from templating.renderer import render_tree
from templating.tree import load_template_tree
from versioning import PhpVersionResolver, ResolvedVersion, build_version_request, version_line
from . import composer as composer_steps
from .scripts import profile_d_script, rewrite_apachectl, start_script

logger = logging.getLogger(__name__)


class Supplier:
    """Drives one staging run of the supply phase."""

    def __init__(
        self,
        manifest: Manifest,
        stager: Stager,
        command: Optional[Command] = None,
        environ: Optional[Mapping[str, str]] = None,
        session: Optional[requests.Session] = None,
        stage_config_root: str = Constants.STAGE_CONFIG_ROOT,
    ):
        self.manifest = manifest
        self.stager = stager
        self.command = command if command is not None else Command()
        self.environ = dict(os.environ if environ is None else environ)
        self.session = session
        self.stage_config_root = stage_config_root

        self.composer_token = ""
        self.options = OptionsFile()
        self.composer = ComposerFile()
        self.composer_path: Optional[str] = None
        self.php_version: Optional[ResolvedVersion] = None
        self.extensions = ExtensionSet()
        self.web_dir = Constants.DEFAULT_WEBDIR

    def steps(self) -> List[Tuple[str, Callable[[], None]]]:
        return [
            ("reading config", self.read_config),
            ("php version", self.setup_php_version),
            ("extensions", self.setup_extensions),
            ("installing httpd", self.install_httpd),
            ("installing php", self.install_php),
            ("writing config files", self.write_config_files),
            ("installing composer", self.install_composer),
            ("running composer", self.run_composer),
            ("installing varify", self.install_varify),
            ("writing profile.d", self.write_profile_d),
            ("writing start file", self.write_start_file),
        ]

    def run(self) -> None:
        begin_step(logger, "Supplying php")
        self.composer_token = self.environ.get(Constants.ENV_COMPOSER_TOKEN, "")
        for phase, step in self.steps():
            try:
                step()
            except (BuildpackError, OSError) as exc:
                logger.error("Error while %s: %s", phase, exc)
                raise StepError(phase, exc) from exc

    def read_config(self) -> None:
        self.options = load_options(self.stager.build_dir)
        self.web_dir = self.options.webdir or Constants.DEFAULT_WEBDIR
        self.composer_path = locate_composer(self.stager.build_dir, self.environ)
        self.composer = load_composer(self.composer_path)

    def setup_php_version(self) -> None:
        request = build_version_request(self.options.php_version, self.composer.php_constraint)
        resolver = PhpVersionResolver(
            self.manifest.all_dependency_versions(Constants.DEP_PHP),
            lambda: self.manifest.default_version(Constants.DEP_PHP).version,
        )
        self.php_version = resolver.resolve(request)
        logger.info("PHP version %s (%s)", self.php_version.version, self.php_version.source.value)

    def setup_extensions(self) -> None:
        self.extensions = aggregate(
            self.options.php_extensions,
            self.options.zend_extensions,
            self.composer.requires,
        )

    def install_httpd(self) -> None:
        dep_dir = self.stager.dep_dir
        self.manifest.install_only_version(Constants.DEP_HTTPD, dep_dir)
        for sub in ("bin", "lib"):
            self.stager.link_directory_in_dep_dir(os.path.join(dep_dir, "httpd", sub), sub)

        logger.debug("Rewrite references in apachectl from '/app/httpd/' to '$DEPS_DIR/%s/httpd/'", self.stager.deps_idx)
        apachectl = os.path.join(dep_dir, "httpd", "bin", "apachectl")
        with open(apachectl, "rb") as fh:
            text = fh.read()
        with open(apachectl, "wb") as fh:
            fh.write(rewrite_apachectl(text, self.stager.deps_idx))
        os.chmod(apachectl, 0o755)

    def install_php(self) -> None:
        dep = Dependency(Constants.DEP_PHP, self.php_version.version)
        self.manifest.install_dependency(dep, self.stager.dep_dir)
        for sub in ("bin", "lib"):
            self.stager.link_directory_in_dep_dir(os.path.join(self.stager.dep_dir, "php", sub), sub)

    def write_config_files(self) -> None:
        begin_step(logger, "Write config files")
        line = version_line(self.php_version.version)
        logger.debug("PHP VersionLine: %s", line)
        settings = LayoutSettings(
            webdir=self.web_dir,
            libdir=self.options.libdir or Constants.DEFAULT_LIBDIR,
        )
        stage_ctx, run_ctx = build_contexts(
            self.php_version,
            self.extensions,
            settings,
            stage_paths(self.stager.build_dir, self.stager.deps_dir, self.stager.cache_dir),
            run_paths(),
            self.stager.deps_idx,
        )
        logger.debug("PhpExtensions: %s", stage_ctx["PhpExtensions"])
        logger.debug("ZendExtensions: %s", stage_ctx["ZendExtensions"])
        tree = load_template_tree(self.stager.build_dir, line)
        render_tree(tree, stage_ctx, run_ctx, self.stage_config_root, self.stager.dep_dir)

    def install_composer(self) -> None:
        if not self.composer_path:
            return
        composer_steps.install_composer(self.manifest, self.stager)

    def run_composer(self) -> None:
        if not self.composer_path:
            return
        composer_steps.run_composer(
            self.stager,
            self.command,
            self.composer_path,
            token=self.composer_token,
            environ=self.environ,
            session=self.session,
        )

    def install_varify(self) -> None:
        logger.debug("Installing Varify")
        dest = os.path.join(self.stager.dep_dir, "bin", Constants.VERIFY_BINARY)
        if os.path.exists(dest):
            # an unbuilt buildpack compiles varify straight into place
            return
        os.makedirs(os.path.dirname(dest), exist_ok=True)
        shutil.copy2(os.path.join(self.manifest.root_dir, "bin", Constants.VERIFY_BINARY), dest)

    def write_profile_d(self) -> None:
        begin_step(logger, "Writing profile.d script")
        has_scan_dir = os.path.isdir(os.path.join(self.stager.dep_dir, Constants.PHP_CONF_DEST, "php.ini.d"))
        script = profile_d_script(
            self.stager.deps_idx,
            self.options.admin_email or Constants.DEFAULT_ADMIN_EMAIL,
            has_scan_dir,
        )
        self.stager.write_profile_d(Constants.PROFILE_D_SCRIPT, script)

    def write_start_file(self) -> None:
        begin_step(logger, "Writing start script (%s)", Constants.START_SCRIPT)
        write_executable(
            os.path.join(self.stager.dep_dir, "bin", Constants.START_SCRIPT),
            start_script(self.stager.deps_idx),
        )


def write_executable(path: str, contents: str) -> None:
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8") as fh:
        fh.write(contents)
    os.chmod(path, os.stat(path).st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
