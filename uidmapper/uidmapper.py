# --------------------------------------------------------------------------- #
# MODULE DESCRIPTION                                                          #
# --------------------------------------------------------------------------- #
"""uidmapper command line interface."""

# System modules

import atexit
import getopt
import logging
import sys

import ldap

from uidmapper import umconfig
from uidmapper.umcounter import UMCounter
from uidmapper.umerror import UMConfigError, UMError
from uidmapper.umidentity import derive
from uidmapper.ummapper import UMMapper
from uidmapper.umopt import CONFIG_PROPERTIES, UMOpt
from uidmapper.umuser import UMUser
from uidmapper.umuserdb import UMUserDB

# --------------------------------------------------------------------------- #
# DATA                                                                        #
# --------------------------------------------------------------------------- #

# Command name -> (command description, optional arguments)
#
CMDS = {
    'add': ('Provision a new user with the next uidNumber', '[full name]'),
    'nextid': ('Allocate and print the next uidNumber', ''),
    'derive': ('Show username and home directory for a uidNumber',
               'uidNumber'),
    'show': ('Show the current value of the uidNumber file', ''),
    'create_uidNumber': ('Create uidNumber file with next free uidNumber',
                         '[uidNumber]'),
}

# Commands deriving usernames.
#
CMDS_MAPPER = ('add', 'nextid', 'derive')

CMDS_ALL = list(CMDS.keys())

# Command option -> (optional argument, option description,
#                    commands that use option)
#
CMDS_OPTS = (
    ('h', '', 'Display this usage', CMDS_ALL),
    ('T', '', 'Test mode, show what would be done', CMDS_ALL),
    ('v', '', 'Verbose, log debugging information', CMDS_ALL),
    ('f', 'path', 'uidNumber file path', CMDS_ALL),
    ('p', 'prefix', 'Username prefix', CMDS_MAPPER),
    ('g', 'gidNumber', 'Group ID number', CMDS_MAPPER),
    ('s', 'shell', 'Login shell', CMDS_MAPPER),
    ('a', 'account', 'SLURM account, none if empty', ('add', )),
    ('w', 'seconds', 'Lock timeout', ('add', 'nextid', 'show',
                                      'create_uidNumber')),
)

# Global variables.
#
OPT = UMOpt()
UDB = None  # Initialised later by the commands that need it.

# --------------------------------------------------------------------------- #
# MAIN                                                                        #
# --------------------------------------------------------------------------- #


def main():
    """Program entry function."""

    atexit.register(shutdown)

    if len(sys.argv) > 1 and sys.argv[1][0] != '-':
        OPT.mode = sys.argv.pop(1)

    try:
        opts, args = getopt.getopt(sys.argv[1:], 'a:f:g:p:s:w:hTv')
    except getopt.GetoptError as err:
        print(err)
        usage()
        sys.exit(1)

    for option, arg in opts:
        if option == '-h':
            OPT.help = 1
            usage()
            sys.exit(0)
        elif option == '-T':
            OPT.test = 1
        elif option == '-v':
            OPT.verbose = 1
        elif option == '-f':
            OPT.path = arg
        elif option == '-p':
            OPT.prefix = arg
        elif option == '-g':
            OPT.gidNumber = arg
        elif option == '-s':
            OPT.loginShell = arg
        elif option == '-a':
            OPT.slurmAccount = arg
        elif option == '-w':
            OPT.lock_timeout = arg

    if OPT.mode not in CMDS:
        usage()
        sys.exit(1)

    logging.basicConfig(level=OPT.verbose and logging.DEBUG or logging.INFO,
                        format='%(levelname)s: %(message)s')

    # Optional additional parameters after command line options.
    OPT.args = args

    try:
        if OPT.mode == 'add':
            OPT.validate()
        else:
            OPT.lock_timeout = float(OPT.lock_timeout)
            if OPT.mode in CMDS_MAPPER and OPT.prefix is None:
                raise UMConfigError('No username prefix given (-p)')
        COMMANDS[OPT.mode]()
    except KeyboardInterrupt:
        print()
        sys.exit(1)
        # not reached
    except UMError as err:
        error(err)
        # not reached
    except ValueError as err:
        error(err, 'Invalid argument')
        # not reached
    except ldap.LDAPError as err:
        error(err, 'User database error')
        # not reached

    sys.exit(0)


def shutdown():
    """Cleanup function registered with atexit."""

    if UDB:
        UDB.close()


def usage():
    """Print command line usage and options."""

    if OPT.mode and OPT.mode not in CMDS:
        print("Unknown command '%s'" % OPT.mode)
        OPT.mode = None

    if not OPT.mode:
        print("Usage: uidmapper command [options]")
        if OPT.help:
            for cmd in CMDS_ALL:
                print("  %-20s %s" % (cmd, CMDS[cmd][0]))
            print()
            print("Mapper configuration:")
            for name, label, helptext in CONFIG_PROPERTIES:
                print("  %-20s %s: %s" % (name, label, helptext))
            print()
            print("'uidmapper command -h' for more info on a command's "
                  "options & usage.")
        else:
            print("'uidmapper -h' for more info on available commands")
    else:
        print(CMDS[OPT.mode][0])
        print("Usage: uidmapper", OPT.mode, "[options]", CMDS[OPT.mode][1])
        for i in CMDS_OPTS:
            if OPT.mode in i[3]:
                print(" -%s %-15s%s" % (i[0], i[1], i[2]))


# =========================================================================== #
# MAIN FUNCTIONS                                                              #
# =========================================================================== #


def add():
    """Provision a new user and add them to the user database."""

    usr = UMUser()
    if OPT.args:
        usr.cn = ' '.join(OPT.args)

    mapper = UMMapper(OPT, userdb=connect())
    mapper.import_new_user(usr)
    print(usr, end='')


def nextid():
    """Allocate the next uidNumber and print it with its identity."""

    show_identity(derive(UMCounter(OPT.path, OPT).next_id(), OPT.prefix))


def derive_id():
    """Show the identity a given uidNumber maps to."""

    if not OPT.args:
        raise ValueError('No uidNumber given')
    show_identity(derive(int(OPT.args[0]), OPT.prefix))


def show():
    """Show the current value of the uidNumber file."""

    print('%s: %s=%d' % (OPT.path, umconfig.UIDNUMBER_KEY,
                         UMCounter(OPT.path, OPT).current()))


def create_uidNumber():
    """Write out the uidNumber file, taking the next available uidNumber
    from the command line or from the user database.

    The file holds the last allocated uidNumber, one less than the next
    available one."""

    if OPT.args:
        next_number = int(OPT.args[0])
        if next_number < 1:
            raise ValueError('Next uidNumber must be at least 1')
        last_number = next_number - 1
    else:
        last_number = max(connect().uidNumber_findmax(), 0)
    print('Next available uidNumber:', last_number + 1)
    if OPT.test:
        sys.stderr.write("TEST: %s: %s=%d\n" %
                         (OPT.path, umconfig.UIDNUMBER_KEY, last_number))
    else:
        UMCounter.create(OPT.path, last_number, OPT)


COMMANDS = {
    'add': add,
    'nextid': nextid,
    'derive': derive_id,
    'show': show,
    'create_uidNumber': create_uidNumber,
}

# --------------------------------------------------------------------------- #
# MISCELLANEOUS FUNCTIONS                                                     #
# --------------------------------------------------------------------------- #


def connect():
    """Connect to the user database and return it."""

    global UDB
    UDB = UMUserDB(OPT)
    UDB.connect()
    return UDB


def show_identity(identity):
    """Print a DerivedIdentity."""

    print('%-18s:  %s' % ('uidNumber', identity.numericId))
    print('%-18s:  %s' % ('uid', identity.username))
    print('%-18s:  %s' % ('homeDirectory', identity.homeDirectory))


# --------------------------------------------------------------------------- #
# ERROR HANDLING                                                              #
# --------------------------------------------------------------------------- #


def error(e, mesg=None):
    """error(e[, mesg])

    Handle exceptions: prints an optional message followed by the
    exception message. Exits program.

    """

    if not isinstance(e, UMError):
        print("FATAL: ", file=sys.stderr)
    if mesg:
        print(mesg, file=sys.stderr)
    print(e, file=sys.stderr)
    sys.exit(1)


# --------------------------------------------------------------------------- #
# If module is called as script, run main()                                   #
# --------------------------------------------------------------------------- #

if __name__ == "__main__":
    main()
