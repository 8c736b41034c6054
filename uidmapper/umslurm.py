# --------------------------------------------------------------------------- #
# MODULE DESCRIPTION                                                          #
# --------------------------------------------------------------------------- #
"""uidmapper SLURM Module; contains UMSlurm class."""

import logging
import subprocess
import sys

from uidmapper import umconfig
from uidmapper.umerror import ExternalProcessFailure
from uidmapper.umopt import UMOpt

# --------------------------------------------------------------------------- #
# DATA                                                                        #
# --------------------------------------------------------------------------- #

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------------- #
# CLASSES                                                                     #
# --------------------------------------------------------------------------- #


class UMSlurm:
    """Class to register users with SLURM accounting."""

    def __init__(self, opt=None, command=umconfig.COMMAND_SACCTMGR):
        """Create new UMSlurm object."""

        self.opt = opt or UMOpt()
        self.command = command

    def register_account(self, username, account):
        """Add username to SLURM with account as its default account.

        Waits at most opt.slurm_timeout seconds for sacctmgr. A command
        still running after that is left to finish on its own.
        """

        cmd = self.gen_command(username, account)
        if self.opt.test:
            sys.stderr.write("TEST: runcmd: %s\n" % ' '.join(cmd))
            return

        try:
            proc = subprocess.Popen(cmd,
                                    cwd=umconfig.SACCTMGR_CWD,
                                    stdin=subprocess.DEVNULL,
                                    stdout=subprocess.DEVNULL,
                                    stderr=subprocess.DEVNULL)
        except OSError as err:
            raise ExternalProcessFailure("Could not run '%s': %s" %
                                         (cmd[0], err))
        try:
            status = proc.wait(timeout=self.opt.slurm_timeout)
        except subprocess.TimeoutExpired:
            logger.warning("'%s' still running after %s seconds, not waiting",
                           ' '.join(cmd), self.opt.slurm_timeout)
            return
        if status != 0:
            raise ExternalProcessFailure("Command '%s' failed with status %d" %
                                         (' '.join(cmd), status))
        logger.info("Added '%s' to SLURM account '%s'", username, account)

    def gen_command(self, username, account):
        """Return the sacctmgr argument list for registering username."""

        return [self.command, 'add', 'user', username,
                'defaultaccount=%s' % account, '-i']
