# --------------------------------------------------------------------------- #
# MODULE DESCRIPTION                                                          #
# --------------------------------------------------------------------------- #
"""uidmapper Configuration Module; contains local configuration information."""

# System modules

import os

# --------------------------------------------------------------------------- #
# DATA                                                                        #
# --------------------------------------------------------------------------- #

# Find out where the uidmapper directory is.

DIR_UIDMAPPER = (os.path.dirname(__file__) or '.') + os.sep

# Username and home directory layout.

USERNAME_DIGITS = 4
HOME_VOLUMES = 10
DIR_HOME_VOL = '/home/vol'

# Counter file.

FILE_UIDNUMBER = DIR_UIDMAPPER + 'uidNumber.properties'
UIDNUMBER_KEY = 'nextId'
LOCK_SUFFIX = '.lock'
LOCK_TIMEOUT = 10.0
LOCK_INTERVAL = 0.05

# Default account attribute values.

SHELL_DEFAULT = '/bin/bash'

# LDAP settings.

LDAP_URI = 'ldap://ldap.internal'
LDAP_ROOT_DN = 'cn=root,ou=ldap,o=uidmapper'
LDAP_ROOTPW_FILE = '/etc/ldap.secret'
LDAP_ACCOUNTS_TREE = 'ou=accounts,o=uidmapper'
LDAP_DEFAULT_OBJECTCLASS = ['posixAccount', 'top', 'account']

# Commands.

COMMAND_SACCTMGR = '/usr/bin/sacctmgr'
SACCTMGR_TIMEOUT = 5.0
SACCTMGR_CWD = '/'

# --------------------------------------------------------------------------- #
# MODULE FUNCTIONS                                                            #
# --------------------------------------------------------------------------- #


def gen_username(prefix, numeric_id):
    """Construct a username from prefix and the last USERNAME_DIGITS digits
    of numeric_id. Short ids are zero-padded first, so 7 gives 0007."""

    digits = '%0*d' % (USERNAME_DIGITS, numeric_id)
    return prefix + digits[-USERNAME_DIGITS:]


def gen_homedir(username, numeric_id):
    """Construct a user's home directory path given username and numeric id.

    Users are spread over HOME_VOLUMES volumes by the last digit of their
    id, e.g. 1234 lives on /home/vol04.
    """

    return '%s%02d/%s' % (DIR_HOME_VOL, numeric_id % HOME_VOLUMES, username)


def gen_lockfile(path):
    """Return the lock file path guarding the counter file at path."""

    return path + LOCK_SUFFIX
