# --------------------------------------------------------------------------- #
# MODULE DESCRIPTION                                                          #
# --------------------------------------------------------------------------- #
"""uidmapper Options Module; contains UMOpt class."""

import re

from uidmapper import umconfig
from uidmapper.umerror import UMConfigError

# --------------------------------------------------------------------------- #
# DATA                                                                        #
# --------------------------------------------------------------------------- #

# Configuration property -> (label, help text) as shown to whoever sets up
# the mapper.
#
CONFIG_PROPERTIES = (
    ('path', 'uidNumber File Path',
     'Path to file on disk that contains the next uidNumber'),
    ('prefix', 'Username Prefix', 'Username Prefix'),
    ('gidNumber', 'gidNumber', 'Group ID Number'),
    ('slurmAccount', 'SLURM account', 'SLURM account'),
    ('loginShell', 'Login Shell', 'Login Shell'),
)

RE_NUMBER = re.compile(r'^[0-9]+$')

# --------------------------------------------------------------------------- #
# CLASSES                                                                     #
# --------------------------------------------------------------------------- #


class UMOpt:
    """Class for storing options to be shared by modules"""

    def __init__(self):
        """Create new UMOpt object."""

        # Mapper configuration.
        self.path = umconfig.FILE_UIDNUMBER
        self.prefix = None
        self.gidNumber = None
        self.loginShell = umconfig.SHELL_DEFAULT
        self.slurmAccount = None
        # Used by all modules.
        self.test = None
        # Used by UMCounter.
        self.lock_timeout = umconfig.LOCK_TIMEOUT
        # Used by UMSlurm.
        self.slurm_timeout = umconfig.SACCTMGR_TIMEOUT
        # Used by uidmapper.
        self.mode = None
        self.args = []
        self.help = None
        self.verbose = None

    @classmethod
    def from_config(cls, config):
        """Build a validated UMOpt from a string-keyed configuration map,
        as handed over by the identity broker."""

        opt = cls()
        for name, _, _ in CONFIG_PROPERTIES:
            if name in config:
                setattr(opt, name, config[name])
        if 'path' not in config:
            opt.path = None
        opt.validate()
        return opt

    def validate(self):
        """Check the mapper configuration, raising UMConfigError on the
        first problem found. gidNumber is normalised to an integer."""

        if not self.path:
            raise UMConfigError('No uidNumber file path configured')
        if self.prefix is None:
            raise UMConfigError('No username prefix configured')
        if self.gidNumber is None or not RE_NUMBER.match(
                str(self.gidNumber)):
            raise UMConfigError("Invalid gidNumber '%s'" % self.gidNumber)
        self.gidNumber = int(self.gidNumber)
        if not self.loginShell:
            raise UMConfigError('No login shell configured')
        if not self.slurmAccount:
            self.slurmAccount = None
        try:
            self.lock_timeout = float(self.lock_timeout)
            self.slurm_timeout = float(self.slurm_timeout)
        except (TypeError, ValueError):
            raise UMConfigError('Timeouts must be numbers of seconds')
        if self.lock_timeout < 0 or self.slurm_timeout < 0:
            raise UMConfigError('Timeouts must not be negative')
