"""uidmapper Test Module; Tests mapper configuration."""

import unittest

from uidmapper.umerror import UMConfigError, UMFatalError
from uidmapper.umopt import CONFIG_PROPERTIES, UMOpt

CONFIG = {'path': '/srv/uidmapper/uidNumber.properties',
          'prefix': 'user',
          'gidNumber': '1000',
          'loginShell': '/bin/bash',
          'slurmAccount': 'physics', }


class UMOptTestCase(unittest.TestCase):
    """Test Case class for UMOpt.from_config"""

    def config(self, **changes):
        config = dict(CONFIG, **changes)
        return {k: v for k, v in config.items() if v is not None}

    def test_valid(self):
        opt = UMOpt.from_config(CONFIG)
        self.assertEqual(opt.path, CONFIG['path'])
        self.assertEqual(opt.prefix, 'user')
        self.assertEqual(opt.gidNumber, 1000)
        self.assertEqual(opt.loginShell, '/bin/bash')
        self.assertEqual(opt.slurmAccount, 'physics')

    def test_empty_slurm_account_disables(self):
        self.assertIsNone(
            UMOpt.from_config(self.config(slurmAccount='')).slurmAccount)
        self.assertIsNone(
            UMOpt.from_config(self.config(slurmAccount=None)).slurmAccount)

    def test_empty_prefix_allowed(self):
        self.assertEqual(UMOpt.from_config(self.config(prefix='')).prefix, '')

    def test_missing_path(self):
        self.assertRaises(UMConfigError, UMOpt.from_config,
                          self.config(path=None))
        self.assertRaises(UMConfigError, UMOpt.from_config,
                          self.config(path=''))

    def test_missing_prefix(self):
        self.assertRaises(UMConfigError, UMOpt.from_config,
                          self.config(prefix=None))

    def test_bad_gid_number(self):
        for gid in (None, '', 'abc', '-1', '10.5'):
            with self.subTest(gidNumber=gid):
                self.assertRaises(UMConfigError, UMOpt.from_config,
                                  self.config(gidNumber=gid))

    def test_missing_shell(self):
        self.assertRaises(UMConfigError, UMOpt.from_config,
                          self.config(loginShell=''))

    def test_bad_timeout(self):
        opt = UMOpt.from_config(CONFIG)
        opt.lock_timeout = 'soon'
        self.assertRaises(UMConfigError, opt.validate)
        opt.lock_timeout = -1
        self.assertRaises(UMConfigError, opt.validate)

    def test_config_error_is_fatal(self):
        self.assertTrue(issubclass(UMConfigError, UMFatalError))
        self.assertEqual(str(UMConfigError('bad')), 'FATAL: bad')

    def test_config_properties(self):
        self.assertEqual(
            sorted(i[0] for i in CONFIG_PROPERTIES),
            ['gidNumber', 'loginShell', 'path', 'prefix', 'slurmAccount'])


if __name__ == "__main__":
    unittest.main()  # run all tests
