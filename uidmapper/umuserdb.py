# --------------------------------------------------------------------------- #
# MODULE DESCRIPTION                                                          #
# --------------------------------------------------------------------------- #
"""uidmapper User Database Module; contains UMUserDB class."""
import logging
import sys

import ldap
import ldap.dn
import ldap.filter

from uidmapper import umconfig
from uidmapper.umerror import UMFatalError
from uidmapper.umopt import UMOpt

# --------------------------------------------------------------------------- #
# DATA                                                                        #
# --------------------------------------------------------------------------- #

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------------- #
# CLASSES                                                                     #
# --------------------------------------------------------------------------- #


class UMUserDB:
    """Class to interface with user database."""

    def __init__(self, opt=None):
        """Create new UMUserDB object."""
        self.opt = opt or UMOpt()
        self.ldap = None

    def connect(self,
                uri=umconfig.LDAP_URI,
                dn=umconfig.LDAP_ROOT_DN,
                password=None):
        """Connect to database.
        Custom URI, DN and password may be given. Password if not given
        will be read from shared secret file set in umconfig."""
        if not password:
            try:
                with open(umconfig.LDAP_ROOTPW_FILE, 'r') as pw_file:
                    password = pw_file.readline().rstrip()
            except OSError:
                raise UMFatalError("Unable to open LDAP root password file")

        self.ldap = ldap.initialize(uri)
        self.ldap.set_option(ldap.OPT_PROTOCOL_VERSION, 3)
        self.ldap.simple_bind_s(dn, password)

    def close(self):
        """Close database connection."""
        if self.ldap:
            self.ldap.unbind_s()
            self.ldap = None

    # ------------------------------------------------------------------- #
    # USER METHODS                                                        #
    # ------------------------------------------------------------------- #

    def check_userfree(self, uid):
        """Raise UMFatalError if username is already taken."""
        res = self.ldap.search_s(
            umconfig.LDAP_ACCOUNTS_TREE, ldap.SCOPE_ONELEVEL,
            'uid=%s' % ldap.filter.escape_filter_chars(uid), ('uid', ))
        if res:
            raise UMFatalError("Username '%s' is already taken" % uid)

    def add(self, usr):
        """Add new UMUser object to database.
        Raises UMFatalError if the username is already taken, which happens
        when two uidNumbers share their last four digits."""
        self.check_userfree(usr.uid)
        if not usr.objectClass:
            usr.objectClass = list(umconfig.LDAP_DEFAULT_OBJECTCLASS)
        if not usr.cn:
            usr.cn = usr.uid
        self.wrapper(self.ldap.add_s, self.uid2dn(usr.uid),
                     self.usr2ldap_add(usr))
        logger.info("Added '%s' (uidNumber %s) to %s", usr.uid,
                    usr.uidNumber, umconfig.LDAP_ACCOUNTS_TREE)

    def uidNumber_findmax(self):
        """Return highest uidNumber found in LDAP accounts tree.
        This is only used to create the uidNumber file, UMCounter should be
        used for getting the next available uidNumber."""

        res = self.ldap.search_s(umconfig.LDAP_ACCOUNTS_TREE,
                                 ldap.SCOPE_ONELEVEL,
                                 'objectClass=posixAccount', ('uidNumber', ))

        maxuid = -1
        for i in res:
            if 'uidNumber' not in i[1]:
                continue
            tmp = int(i[1]['uidNumber'][0])
            if tmp > maxuid:
                maxuid = tmp

        return maxuid

    # ------------------------------------------------------------------ #
    # INTERNAL METHODS                                                   #
    # ------------------------------------------------------------------ #

    @classmethod
    def uid2dn(cls, uid):
        """Return full Distinguished Name (DN) for given username."""

        return "uid=%s,%s" % (ldap.dn.escape_dn_chars(uid),
                              umconfig.LDAP_ACCOUNTS_TREE)

    @classmethod
    def usr2ldap_add(cls, usr):
        """Return a list of (type, [values]) pairs for given user.
        This list is used in LDAP add queries."""

        tmp = []
        for i in usr.attr_list:
            var = getattr(usr, i)
            if var is None:
                continue
            if i in usr.attr_list_value:
                tmp.append((i, [str(j).encode() for j in var]))
            else:
                tmp.append((i, [str(var).encode()]))
        return tmp

    def wrapper(self, function, *keywords, **arguments):
        """Wrapper method for executing other functions.
        If test mode is set, print function name and arguments.
        Otherwise call function with arguments."""
        if self.opt.test:
            sys.stderr.write("TEST: %s(" % function.__name__)
            for i in keywords:
                sys.stderr.write("%s, " % (i, ))
            for k, var in list(arguments.items()):
                sys.stderr.write("%s = %s, " % (k, var))
            sys.stderr.write(")\n")
            return None
        return function(*keywords, **arguments)
