# --------------------------------------------------------------------------- #
# MODULE DESCRIPTION                                                          #
# --------------------------------------------------------------------------- #
"""uidmapper Mapper Module; contains UMMapper class."""

import logging

from uidmapper.umcounter import UMCounter
from uidmapper.umerror import ExternalProcessFailure
from uidmapper.umidentity import derive
from uidmapper.umslurm import UMSlurm

# --------------------------------------------------------------------------- #
# DATA                                                                        #
# --------------------------------------------------------------------------- #

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------------- #
# CLASSES                                                                     #
# --------------------------------------------------------------------------- #


class UMMapper:
    """Class to provision users the first time they are imported.

    The counter, the SLURM registrar and the user database may be
    substituted, anything with the same methods will do.
    """

    def __init__(self, opt, counter=None, slurm=None, userdb=None):
        """Create new UMMapper object from a validated UMOpt."""

        self.opt = opt
        self.counter = counter or UMCounter(opt.path, opt)
        self.slurm = slurm or UMSlurm(opt)
        self.userdb = userdb

    def import_new_user(self, usr):
        """Give a newly imported user their username and account attributes.

        Allocates a uidNumber, derives the username and home directory from
        it and sets them on usr. If a user database is attached the user is
        added to it. Finally the user is added to the configured SLURM
        account, if any. Counter errors propagate before usr is touched.
        SLURM errors are logged only, since the uidNumber is spent by then.

        Returns the DerivedIdentity.
        """

        identity = derive(self.counter.next_id(), self.opt.prefix)

        usr.set_username(identity.username)
        usr.set_attribute('uidNumber', str(identity.numericId))
        usr.set_attribute('gidNumber', str(self.opt.gidNumber))
        usr.set_attribute('homeDirectory', identity.homeDirectory)
        usr.set_attribute('loginShell', self.opt.loginShell)

        if self.userdb is not None:
            self.userdb.add(usr)

        if self.opt.slurmAccount:
            try:
                self.slurm.register_account(identity.username,
                                            self.opt.slurmAccount)
            except ExternalProcessFailure as err:
                logger.warning("Could not add '%s' to SLURM account '%s': %s",
                               identity.username, self.opt.slurmAccount,
                               err.mesg)

        return identity
