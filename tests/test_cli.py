import unittest
import sys
import io
import logging
import os
import shutil
import tempfile
from contextlib import redirect_stdout, redirect_stderr
from pathlib import Path
from unittest.mock import patch

# Add project root to sys.path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from flatcms.cli import main
from flatcms.core.credentials import CredentialStore


class TestCli(unittest.TestCase):
    def setUp(self):
        self.test_dir = Path(tempfile.mkdtemp())
        self.users = self.test_dir / 'users.json'
        self.missing_config = str(self.test_dir / 'none.json')

    def tearDown(self):
        root = logging.getLogger()
        for handler in list(root.handlers):
            if getattr(handler, '_flatcms', False):
                root.removeHandler(handler)
                handler.close()
        shutil.rmtree(self.test_dir)

    def test_version(self):
        out = io.StringIO()
        with redirect_stdout(out):
            self.assertEqual(main(['--version']), 0)
        self.assertIn('FlatCMS v', out.getvalue())

    def test_add_user(self):
        out = io.StringIO()
        with redirect_stdout(out):
            code = main(['--config', self.missing_config, '--credentials', str(self.users),
                         'add-user', 'alice', '--password', 'secret'])
        self.assertEqual(code, 0)
        self.assertTrue(CredentialStore(self.users).verify('alice', 'secret'))

    def test_add_user_prompts_for_password(self):
        with patch('getpass.getpass', return_value='prompted'), redirect_stdout(io.StringIO()):
            main(['--config', self.missing_config, '--credentials', str(self.users), 'add-user', 'bob'])
        self.assertTrue(CredentialStore(self.users).verify('bob', 'prompted'))

    def test_add_user_taken(self):
        CredentialStore(self.users).create('alice', 'secret')
        err = io.StringIO()
        with redirect_stderr(err):
            code = main(['--config', self.missing_config, '--credentials', str(self.users),
                         'add-user', 'alice', '--password', 'other'])
        self.assertEqual(code, 1)
        self.assertIn('Username taken', err.getvalue())

    def test_start_uses_data_dir(self):
        data_dir = self.test_dir / 'docs'
        env = {'FLATCMS_LOG_DIR': str(self.test_dir / 'logs')}
        with patch.dict(os.environ, env), patch('flask.Flask.run') as run, redirect_stdout(io.StringIO()):
            code = main(['--config', self.missing_config, '--data-dir', str(data_dir),
                         '--credentials', str(self.users), '--port', '8123', 'start'])
        self.assertEqual(code, 0)
        run.assert_called_once_with(host='0.0.0.0', port=8123, debug=False)
        self.assertTrue(data_dir.is_dir())


if __name__ == '__main__':
    unittest.main()
