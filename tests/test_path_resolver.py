"""Unit tests for resource and data path resolution."""

import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from chesstree.utils import path_resolver


class TestPathResolver(unittest.TestCase):

    def test_bundled_config_is_found(self):
        path = path_resolver.get_app_resource_path("chesstree/config/config.json")
        self.assertTrue(path.exists())

    @unittest.skipIf(sys.platform in ("win32", "darwin"), "XDG layout only applies on Linux")
    def test_user_data_directory_follows_xdg(self):
        with mock.patch.dict(os.environ, {"XDG_DATA_HOME": "/tmp/xdg"}):
            os.environ.pop(path_resolver.DATA_DIR_ENV, None)
            self.assertEqual(path_resolver.get_user_data_directory(), Path("/tmp/xdg/chesstree"))

    def test_environment_overrides_user_data_directory(self):
        with mock.patch.dict(os.environ, {path_resolver.DATA_DIR_ENV: "/srv/chesstree-data"}):
            self.assertEqual(path_resolver.get_user_data_directory(), Path("/srv/chesstree-data"))

    def test_data_file_never_goes_next_to_installed_package(self):
        # A writable site-packages, as in any virtualenv
        with tempfile.TemporaryDirectory() as site_packages, tempfile.TemporaryDirectory() as user_dir:
            with mock.patch.object(path_resolver, "get_app_root", return_value=Path(site_packages)), \
                    mock.patch.object(path_resolver, "get_user_data_directory", return_value=Path(user_dir)):
                path = path_resolver.resolve_data_file_path("chesstree.log")
            self.assertEqual(path, Path(user_dir) / "chesstree.log")
            self.assertNotIn(Path(site_packages), path.parents)

    def test_configured_directory_wins(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = path_resolver.resolve_data_file_path("chesstree.log", tmp)
        self.assertEqual(path, Path(tmp) / "chesstree.log")


if __name__ == '__main__':
    unittest.main()
