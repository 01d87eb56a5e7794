"""Shared fixtures: a throwaway buildpack root with file:// dependencies."""

import hashlib
import io
import tarfile

import pytest
import yaml

APACHECTL = b"#!/bin/sh\nHTTPD='/app/httpd/bin/httpd'\nexport LD_LIBRARY_PATH=/app/httpd/lib\n"


def make_tarball(path, files):
    """Write a gzipped tarball holding ``{relative name: bytes}``."""
    with tarfile.open(path, "w:gz") as tf:
        for name, data in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = 0o755
            tf.addfile(info, io.BytesIO(data))
    return path


def sha256_of(path):
    return hashlib.sha256(path.read_bytes()).hexdigest()


class FakeBuildpack:
    """Builds manifest.yml entries backed by local files."""

    def __init__(self, root, files_dir):
        self.root = root
        self.files_dir = files_dir
        self.dependencies = []
        self.default_versions = []

    def add(self, name, version, path, stacks=None, sha256=None):
        self.dependencies.append({
            "name": name,
            "version": version,
            "uri": path.as_uri(),
            "sha256": sha256 if sha256 is not None else sha256_of(path),
            "cf_stacks": stacks or ["cflinuxfs3"],
        })

    def set_default(self, name, version):
        self.default_versions.append({"name": name, "version": version})

    def write(self):
        data = {"default_versions": self.default_versions, "dependencies": self.dependencies}
        (self.root / "manifest.yml").write_text(yaml.safe_dump(data), encoding="utf-8")
        return self.root


@pytest.fixture
def fake_buildpack(tmp_path):
    root = tmp_path / "buildpack"
    files_dir = tmp_path / "files"
    root.mkdir()
    files_dir.mkdir()
    return FakeBuildpack(root, files_dir)


@pytest.fixture
def full_buildpack(fake_buildpack):
    """httpd, two php versions and composer, plus a prebuilt varify."""
    files = fake_buildpack.files_dir
    httpd = make_tarball(files / "httpd.tgz", {
        "httpd/bin/apachectl": APACHECTL,
        "httpd/bin/httpd": b"httpd",
        "httpd/lib/libapr-1.so": b"apr",
    })
    fake_buildpack.add("httpd", "2.4.41", httpd)
    for version in ("7.2.24", "7.3.11"):
        php = make_tarball(files / f"php-{version}.tgz", {
            "php/bin/php": b"php",
            "php/sbin/php-fpm": b"fpm",
            "php/lib/libphp.so": version.encode(),
        })
        fake_buildpack.add("php", version, php)
    composer = files / "composer.phar"
    composer.write_bytes(b"<?php // composer")
    fake_buildpack.add("composer", "1.9.1", composer)
    fake_buildpack.set_default("php", "7.3.11")

    bin_dir = fake_buildpack.root / "bin"
    bin_dir.mkdir()
    (bin_dir / "varify").write_bytes(b"#!/bin/sh\n")
    fake_buildpack.write()
    return fake_buildpack
