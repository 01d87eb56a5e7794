"""Tests for the staging directory layout helpers."""

import os

from staging import Stager


def test_dep_dir(tmp_path):
    stager = Stager("/app", "/cache", str(tmp_path), "4")
    assert stager.dep_dir == os.path.join(str(tmp_path), "4")


def test_link_directory_is_relative_and_idempotent(tmp_path):
    stager = Stager("/app", "/cache", str(tmp_path), "0")
    src = tmp_path / "0" / "php" / "bin"
    src.mkdir(parents=True)
    (src / "php").write_text("php", encoding="utf-8")

    stager.link_directory_in_dep_dir(str(src), "bin")
    stager.link_directory_in_dep_dir(str(src), "bin")

    link = tmp_path / "0" / "bin" / "php"
    assert os.readlink(link) == os.path.join("..", "php", "bin", "php")
    assert link.read_text() == "php"


def test_write_profile_d(tmp_path):
    stager = Stager("/app", "/cache", str(tmp_path), "0")
    path = stager.write_profile_d("env.sh", "export A=1\n")
    assert path == os.path.join(str(tmp_path), "0", "profile.d", "env.sh")
    with open(path, encoding="utf-8") as fh:
        assert fh.read() == "export A=1\n"
