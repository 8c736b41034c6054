"""uidmapper Test Module; Tests SLURM registration."""

import os
import shutil
import tempfile
import time
import unittest
from unittest import mock

from uidmapper import umconfig
from uidmapper.umerror import ExternalProcessFailure, UMWarningError
from uidmapper.umopt import UMOpt
from uidmapper.umslurm import UMSlurm


class UMSlurmTestCase(unittest.TestCase):
    """Test Case class for UMSlurm.register_account"""

    def setUp(self):
        self.dir = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.dir)
        self.out = os.path.join(self.dir, 'out')
        self.opt = UMOpt()

    def script(self, body):
        """Write an executable stand-in for sacctmgr."""
        path = os.path.join(self.dir, 'sacctmgr')
        with open(path, 'w') as script_file:
            script_file.write('#!/bin/sh\n%s\n' % body)
        os.chmod(path, 0o755)
        return path

    def test_command(self):
        slurm = UMSlurm(self.opt)
        self.assertEqual(slurm.gen_command('user1234', 'physics'),
                         [umconfig.COMMAND_SACCTMGR, 'add', 'user',
                          'user1234', 'defaultaccount=physics', '-i'])

    def test_runs_in_root_directory(self):
        command = self.script('echo "$@" > %s\npwd >> %s' %
                              (self.out, self.out))
        UMSlurm(self.opt, command).register_account('user1234', 'physics')
        with open(self.out, 'r') as out_file:
            self.assertEqual(out_file.read(),
                             'add user user1234 defaultaccount=physics -i\n'
                             '/\n')

    def test_failure_status(self):
        command = self.script('exit 3')
        slurm = UMSlurm(self.opt, command)
        with self.assertRaises(ExternalProcessFailure) as ctx:
            slurm.register_account('user1234', 'physics')
        self.assertIn('status 3', str(ctx.exception))

    def test_missing_command(self):
        slurm = UMSlurm(self.opt, os.path.join(self.dir, 'no-such-sacctmgr'))
        self.assertRaises(ExternalProcessFailure, slurm.register_account,
                          'user1234', 'physics')

    def test_timeout_does_not_block(self):
        command = self.script('sleep 3')
        self.opt.slurm_timeout = 0.2
        started = time.monotonic()
        with self.assertLogs('uidmapper.umslurm', 'WARNING'):
            UMSlurm(self.opt, command).register_account('user1234', 'physics')
        self.assertLess(time.monotonic() - started, 2)

    def test_test_mode(self):
        self.opt.test = 1
        slurm = UMSlurm(self.opt, os.path.join(self.dir, 'no-such-sacctmgr'))
        with mock.patch('sys.stderr') as stderr:
            slurm.register_account('user1234', 'physics')
        self.assertIn('defaultaccount=physics',
                      stderr.write.call_args[0][0])

    def test_failure_is_warning(self):
        self.assertTrue(issubclass(ExternalProcessFailure, UMWarningError))


if __name__ == "__main__":
    unittest.main()  # run all tests
