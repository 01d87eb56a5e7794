"""Buildpack dependency manifest: version catalog and installer.

``manifest.yml`` lists every dependency the buildpack can install::

    default_versions:
      - name: php
        version: 7.2.14
    dependencies:
      - name: php
        version: 7.2.14
        uri: https://example.org/php-7.2.14.tgz
        sha256: ...
        cf_stacks: [cflinuxfs3]
"""

from __future__ import annotations

import hashlib
import logging
import os
import shutil
import tarfile
import tempfile
import zipfile
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import unquote, urlparse

import yaml

from constants import Constants
from common.errors import HttpError, ManifestError
from common.http_client import download
from common.logging_utils import begin_step, safe_url

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Dependency:
    name: str
    version: str


@dataclass
class ManifestEntry:
    name: str
    version: str
    uri: str
    sha256: str
    cf_stacks: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ManifestEntry":
        return cls(
            name=str(data.get("name", "")),
            version=str(data.get("version", "")),
            uri=str(data.get("uri", "")),
            sha256=str(data.get("sha256", "")),
            cf_stacks=[str(s) for s in data.get("cf_stacks") or []],
        )


class Manifest:
    """Read-only view of ``manifest.yml`` plus fetch/install helpers."""

    def __init__(self, root_dir: str, stack: Optional[str] = None):
        self.root_dir = root_dir
        self.stack = stack if stack is not None else os.environ.get(Constants.ENV_CF_STACK, "")
        path = os.path.join(root_dir, Constants.MANIFEST_FILE)
        try:
            with open(path, "r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh) or {}
        except OSError as exc:
            raise ManifestError(f"could not read {path}: {exc}") from exc
        except yaml.YAMLError as exc:
            raise ManifestError(f"invalid YAML in {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ManifestError(f"{path} must contain a mapping")

        self.entries = [ManifestEntry.from_dict(d) for d in data.get("dependencies") or [] if isinstance(d, dict)]
        self.defaults: Dict[str, List[str]] = {}
        for d in data.get("default_versions") or []:
            if isinstance(d, dict) and d.get("name"):
                self.defaults.setdefault(str(d["name"]), []).append(str(d.get("version", "")))

    def _for_stack(self, entry: ManifestEntry) -> bool:
        return not self.stack or not entry.cf_stacks or self.stack in entry.cf_stacks

    def all_dependency_versions(self, name: str) -> List[str]:
        """Every catalog version of ``name`` for the current stack, in manifest order."""
        return [e.version for e in self.entries if e.name == name and self._for_stack(e)]

    def default_version(self, name: str) -> Dependency:
        versions = self.defaults.get(name, [])
        if len(versions) != 1:
            raise ManifestError(f"found {len(versions)} default versions for {name}")
        version = versions[0]
        if version not in self.all_dependency_versions(name):
            raise ManifestError(f"default version {version} for {name} is not in the dependency list")
        return Dependency(name=name, version=version)

    def _entry(self, dep: Dependency) -> ManifestEntry:
        for entry in self.entries:
            if entry.name == dep.name and entry.version == dep.version and self._for_stack(entry):
                return entry
        raise ManifestError(f"dependency {dep.name} {dep.version} not found in manifest")

    def fetch_dependency(self, dep: Dependency, out_file: str) -> None:
        """Download ``dep`` to ``out_file`` and verify its checksum."""
        entry = self._entry(dep)
        os.makedirs(os.path.dirname(out_file) or ".", exist_ok=True)
        parsed = urlparse(entry.uri)
        try:
            if parsed.scheme == "file":
                shutil.copyfile(unquote(parsed.path), out_file)
            else:
                download(entry.uri, out_file)
        except (HttpError, OSError) as exc:
            raise ManifestError(f"could not fetch {dep.name} {dep.version}: {exc}") from exc
        logger.debug("Fetched %s %s from %s", dep.name, dep.version, safe_url(entry.uri))
        self._check_sha256(out_file, entry)

    @staticmethod
    def _check_sha256(path: str, entry: ManifestEntry) -> None:
        digest = hashlib.sha256()
        with open(path, "rb") as fh:
            for chunk in iter(lambda: fh.read(Constants.DOWNLOAD_CHUNK_SIZE), b""):
                digest.update(chunk)
        if entry.sha256 and digest.hexdigest() != entry.sha256.lower():
            raise ManifestError(f"dependency sha256 mismatch for {entry.name} {entry.version}")

    def install_dependency(self, dep: Dependency, out_dir: str) -> None:
        """Fetch ``dep`` and unpack it into ``out_dir``."""
        begin_step(logger, "Installing %s %s", dep.name, dep.version)
        entry = self._entry(dep)
        suffix = os.path.basename(urlparse(entry.uri).path) or dep.name
        with tempfile.TemporaryDirectory() as tmp:
            archive = os.path.join(tmp, suffix)
            self.fetch_dependency(dep, archive)
            os.makedirs(out_dir, exist_ok=True)
            try:
                if zipfile.is_zipfile(archive):
                    with zipfile.ZipFile(archive) as zf:
                        zf.extractall(out_dir)
                else:
                    with tarfile.open(archive) as tf:
                        if hasattr(tarfile, "tar_filter"):
                            tf.extractall(out_dir, filter="tar")
                        else:
                            tf.extractall(out_dir)
            except (tarfile.TarError, zipfile.BadZipFile, OSError) as exc:
                raise ManifestError(f"could not extract {dep.name} {dep.version}: {exc}") from exc

    def install_only_version(self, name: str, out_dir: str) -> None:
        """Install ``name`` when the manifest carries exactly one version of it."""
        versions = self.all_dependency_versions(name)
        if len(versions) != 1:
            raise ManifestError(f"expected 1 version of {name}, found {len(versions)}")
        self.install_dependency(Dependency(name=name, version=versions[0]), out_dir)
