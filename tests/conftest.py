"""Shared test fixtures and configuration."""

import tempfile
from pathlib import Path

import pytest
import yaml

from foxforge.git import init_repository


SAMPLE_CONFIG = {
    "name": "MyBrowser",
    "vendor": "My Company",
    "app_id": "org.mybrowser.browser",
    "binary_name": "mybrowser",
    "firefox": {"version": "146.0", "product": "firefox"},
    "build": {"jobs": 8},
}

MOZ_CONFIGURE = """\
include("../toolkit/moz.configure")

imply_option("MOZ_APP_VENDOR", "Mozilla")
imply_option("MOZ_APP_ID", "{ec8030f7-c20a-464f-9b0e-13a3a9e97384}")
"""


def write_engine_tree(engine: Path) -> None:
    """Write a small stand-in for an extracted Firefox source tree."""
    files = {
        "README.md": "# Firefox\n",
        "mach": "#!/usr/bin/env python3\n",
        "browser/moz.configure": MOZ_CONFIGURE,
        "browser/config/version.txt": "146.0\n",
        "browser/branding/unofficial/configure.sh": 'MOZ_APP_DISPLAYNAME="Nightly"\n',
        "browser/branding/unofficial/locales/en-US/brand.properties": "brandShortName=Nightly\n",
        "browser/branding/unofficial/locales/en-US/brand.ftl": "-brand-short-name = Nightly\n",
        "toolkit/lib.js": "function a() {\n  return 1;\n}\n",
    }
    for rel_path, content in files.items():
        path = engine / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def engine_repo(tmp_path):
    """Create an engine directory with a baseline commit."""
    engine = tmp_path / "engine"
    write_engine_tree(engine)
    init_repository(engine, "firefox")
    return engine


@pytest.fixture
def project(tmp_path, engine_repo, monkeypatch):
    """Create a foxforge project around engine_repo and chdir into it."""
    (tmp_path / "forge.yaml").write_text(
        yaml.dump(SAMPLE_CONFIG, default_flow_style=False, sort_keys=False)
    )
    (tmp_path / "patches").mkdir()
    (tmp_path / "configs").mkdir()
    monkeypatch.chdir(tmp_path)
    return tmp_path
