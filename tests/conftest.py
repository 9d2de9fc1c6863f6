"""Shared fixtures for the bundler test suite.

`plugin_dir` builds a small WordPress-style plugin tree on disk:

    test_plugin/
        test_plugin.php            (contains the %%VERSION%% placeholder)
        readme.txt
        deleteme/notes.txt
        dist/app.css.map, dist/app.js.map
        dist/assets/{css_asset,css_asset.min}.css
        dist/assets/{js_asset,js_asset.min}.js
        src/src_file.vue
        src/deleteme/tmp.txt
        src/child/grandchild/some_file.vue
        src/child/grandchild/deleteme/tmp.txt
"""

from pathlib import Path

import pytest

from ptbundler.core.config import Settings
from ptbundler.pipeline.types import BundleSpec

PLUGIN_NAME = "test_plugin"

ENTRY_FILE = """<?php
/**
 * Plugin Name: Test Plugin
 * Version: %%VERSION%%
 */
define('TEST_PLUGIN_VERSION', '%%VERSION%%');
"""

PLUGIN_FILES: dict[str, str] = {
    f"{PLUGIN_NAME}.php": ENTRY_FILE,
    "readme.txt": "=== Test Plugin ===\n",
    "deleteme/notes.txt": "scratch\n",
    "dist/app.css.map": "{}",
    "dist/app.js.map": "{}",
    "dist/assets/css_asset.css": "body { color: red; }\n",
    "dist/assets/css_asset.min.css": "body{color:red}",
    "dist/assets/js_asset.js": "console.log('hi');\n",
    "dist/assets/js_asset.min.js": "console.log('hi')",
    "src/src_file.vue": "<template><div/></template>\n",
    "src/deleteme/tmp.txt": "tmp\n",
    "src/child/grandchild/some_file.vue": "<template><span/></template>\n",
    "src/child/grandchild/deleteme/tmp.txt": "tmp\n",
}


def write_tree(root: Path, files: dict[str, str]) -> Path:
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def plugin_dir(tmp_path) -> Path:
    return write_tree(tmp_path / PLUGIN_NAME, PLUGIN_FILES)


@pytest.fixture
def workdir(tmp_path) -> Path:
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def make_spec(plugin_dir, workdir):
    """Factory for specs bundling `plugin_dir` with staging under `workdir`."""

    def _make(**overrides) -> BundleSpec:
        kwargs = {
            "ptname": PLUGIN_NAME,
            "basedir": str(plugin_dir),
            "workdir": str(workdir),
            "outdir": "bundled",
        }
        kwargs.update(overrides)
        return BundleSpec(**kwargs)

    return _make
