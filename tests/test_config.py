import unittest
import sys
import json
import os
import shutil
import tempfile
from pathlib import Path
from unittest.mock import patch

# Add project root to sys.path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from flatcms.core.config import find_project_root, load_config, load_config_file


class TestConfig(unittest.TestCase):
    def setUp(self):
        self.test_dir = Path(tempfile.mkdtemp())
        self.missing = self.test_dir / 'missing.json'

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = load_config(config_path=self.missing)
        self.assertTrue(config['DATA_DIR'].endswith('data'))
        self.assertTrue(config['CREDENTIALS_FILE'].endswith('users.json'))
        self.assertEqual(config['MAX_CONTENT_LENGTH'], 20 * 1024 * 1024)
        self.assertFalse(config['DEBUG'])

    def test_project_root_for_source_checkout(self):
        (self.test_dir / 'flatcms').mkdir()
        (self.test_dir / 'pyproject.toml').write_text('')
        self.assertEqual(find_project_root(self.test_dir / 'flatcms'), self.test_dir)

    def test_project_root_for_installed_package(self):
        site_packages = self.test_dir / 'lib' / 'site-packages'
        (site_packages / 'flatcms').mkdir(parents=True)
        self.assertEqual(find_project_root(site_packages / 'flatcms'), Path.cwd())

    def test_file_keys_are_uppercased(self):
        path = self.test_dir / 'config.json'
        path.write_text(json.dumps({'data_dir': '/srv/docs'}))
        self.assertEqual(load_config_file(path), {'DATA_DIR': '/srv/docs'})

    def test_broken_file_is_ignored(self):
        path = self.test_dir / 'config.json'
        path.write_text('{not json')
        self.assertEqual(load_config_file(path), {})

    def test_precedence(self):
        path = self.test_dir / 'config.json'
        path.write_text(json.dumps({'data_dir': '/from/file', 'log_dir': '/logs/file'}))
        env = {'FLATCMS_DATA_DIR': '/from/env', 'FLATCMS_MAX_UPLOAD_MB': '2'}
        with patch.dict(os.environ, env, clear=True):
            config = load_config({'LOG_DIR': '/logs/override'}, config_path=path)
        self.assertEqual(config['DATA_DIR'], '/from/env')
        self.assertEqual(config['LOG_DIR'], '/logs/override')
        self.assertEqual(config['MAX_CONTENT_LENGTH'], 2 * 1024 * 1024)

    def test_invalid_env_value_is_ignored(self):
        with patch.dict(os.environ, {'FLATCMS_MAX_UPLOAD_MB': 'lots'}, clear=True):
            config = load_config(config_path=self.missing)
        self.assertEqual(config['MAX_CONTENT_LENGTH'], 20 * 1024 * 1024)


if __name__ == '__main__':
    unittest.main()
