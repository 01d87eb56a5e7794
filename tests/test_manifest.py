"""Tests for the dependency manifest."""

import io
import os
import tarfile
import warnings

import pytest

from common.errors import ManifestError
from staging import Dependency, Manifest

from conftest import make_tarball


class TestCatalog:

    def test_versions_for_stack(self, fake_buildpack):
        blob = fake_buildpack.files_dir / "blob"
        blob.write_bytes(b"x")
        fake_buildpack.add("php", "7.2.1", blob, stacks=["cflinuxfs3"])
        fake_buildpack.add("php", "7.2.2", blob, stacks=["cflinuxfs2"])
        fake_buildpack.add("php", "7.3.0", blob, stacks=["cflinuxfs3", "cflinuxfs2"])
        fake_buildpack.write()

        assert Manifest(str(fake_buildpack.root), stack="cflinuxfs3").all_dependency_versions("php") == ["7.2.1", "7.3.0"]
        assert Manifest(str(fake_buildpack.root), stack="").all_dependency_versions("php") == ["7.2.1", "7.2.2", "7.3.0"]

    def test_unknown_dependency_is_empty(self, full_buildpack):
        assert Manifest(str(full_buildpack.root), stack="cflinuxfs3").all_dependency_versions("nginx") == []

    def test_default_version(self, full_buildpack):
        manifest = Manifest(str(full_buildpack.root), stack="cflinuxfs3")
        assert manifest.default_version("php") == Dependency("php", "7.3.11")

    def test_missing_default_is_fatal(self, full_buildpack):
        manifest = Manifest(str(full_buildpack.root), stack="cflinuxfs3")
        with pytest.raises(ManifestError):
            manifest.default_version("httpd")

    def test_default_not_in_catalog_is_fatal(self, fake_buildpack):
        fake_buildpack.set_default("php", "9.9.9")
        fake_buildpack.write()
        with pytest.raises(ManifestError):
            Manifest(str(fake_buildpack.root), stack="").default_version("php")

    def test_missing_manifest(self, tmp_path):
        with pytest.raises(ManifestError):
            Manifest(str(tmp_path))

    def test_invalid_yaml(self, tmp_path):
        (tmp_path / "manifest.yml").write_text("dependencies: [unclosed", encoding="utf-8")
        with pytest.raises(ManifestError):
            Manifest(str(tmp_path))


class TestInstall:

    def test_install_dependency_extracts(self, full_buildpack, tmp_path):
        manifest = Manifest(str(full_buildpack.root), stack="cflinuxfs3")
        out = tmp_path / "out"
        manifest.install_dependency(Dependency("php", "7.2.24"), str(out))
        assert (out / "php" / "lib" / "libphp.so").read_bytes() == b"7.2.24"

    def test_install_only_version(self, full_buildpack, tmp_path):
        manifest = Manifest(str(full_buildpack.root), stack="cflinuxfs3")
        out = tmp_path / "out"
        manifest.install_only_version("httpd", str(out))
        assert (out / "httpd" / "bin" / "apachectl").exists()

    def test_install_only_version_rejects_many(self, full_buildpack, tmp_path):
        manifest = Manifest(str(full_buildpack.root), stack="cflinuxfs3")
        with pytest.raises(ManifestError):
            manifest.install_only_version("php", str(tmp_path / "out"))

    def test_sha_mismatch(self, fake_buildpack, tmp_path):
        archive = make_tarball(fake_buildpack.files_dir / "httpd.tgz", {"httpd/bin/httpd": b"x"})
        fake_buildpack.add("httpd", "2.4.41", archive, sha256="0" * 64)
        fake_buildpack.write()
        manifest = Manifest(str(fake_buildpack.root), stack="cflinuxfs3")
        with pytest.raises(ManifestError) as exc_info:
            manifest.install_dependency(Dependency("httpd", "2.4.41"), str(tmp_path / "out"))
        assert "sha256" in str(exc_info.value)

    def test_fetch_unknown_version(self, full_buildpack, tmp_path):
        manifest = Manifest(str(full_buildpack.root), stack="cflinuxfs3")
        with pytest.raises(ManifestError):
            manifest.fetch_dependency(Dependency("php", "5.6.0"), str(tmp_path / "php.tgz"))

    def test_fetch_plain_file(self, full_buildpack, tmp_path):
        manifest = Manifest(str(full_buildpack.root), stack="cflinuxfs3")
        dest = tmp_path / "bin" / "composer"
        manifest.fetch_dependency(Dependency("composer", "1.9.1"), str(dest))
        assert dest.read_bytes() == b"<?php // composer"

    def test_tarball_with_absolute_symlink(self, fake_buildpack, tmp_path):
        archive = fake_buildpack.files_dir / "httpd.tgz"
        with tarfile.open(archive, "w:gz") as tf:
            data = b"httpd"
            info = tarfile.TarInfo("httpd/bin/httpd")
            info.size = len(data)
            tf.addfile(info, io.BytesIO(data))
            link = tarfile.TarInfo("httpd/bin/env")
            link.type = tarfile.SYMTYPE
            link.linkname = "/usr/bin/env"
            tf.addfile(link)
        fake_buildpack.add("httpd", "2.4.41", archive)
        fake_buildpack.write()
        manifest = Manifest(str(fake_buildpack.root), stack="cflinuxfs3")
        out = tmp_path / "out"
        with warnings.catch_warnings():
            warnings.simplefilter("error", DeprecationWarning)
            manifest.install_dependency(Dependency("httpd", "2.4.41"), str(out))
        assert os.readlink(out / "httpd" / "bin" / "env") == "/usr/bin/env"
        assert (out / "httpd" / "bin" / "httpd").read_bytes() == b"httpd"
