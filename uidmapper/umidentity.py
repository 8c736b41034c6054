# --------------------------------------------------------------------------- #
# MODULE DESCRIPTION                                                          #
# --------------------------------------------------------------------------- #
"""uidmapper Identity Module; derives usernames and home directories from
allocated uidNumbers."""

import collections

from uidmapper import umconfig

# --------------------------------------------------------------------------- #
# DATA                                                                        #
# --------------------------------------------------------------------------- #

DerivedIdentity = collections.namedtuple(
    'DerivedIdentity', ('numericId', 'username', 'homeDirectory'))

# --------------------------------------------------------------------------- #
# MODULE FUNCTIONS                                                            #
# --------------------------------------------------------------------------- #


def derive(numeric_id, prefix):
    """derive(numeric_id, prefix) -> DerivedIdentity

    Pure mapping from an allocated id to the username (prefix followed by
    the last four digits of the id) and home directory on volume id mod 10.

    >>> derive(1234, 'user')
    DerivedIdentity(numericId=1234, username='user1234', homeDirectory='/home/vol04/user1234')
    """

    if isinstance(numeric_id, bool) or not isinstance(numeric_id, int):
        raise TypeError('numeric id must be an integer, not %r' % (numeric_id,))
    if numeric_id < 0:
        raise ValueError('numeric id must not be negative: %d' % numeric_id)

    username = umconfig.gen_username(prefix, numeric_id)
    return DerivedIdentity(numeric_id, username,
                           umconfig.gen_homedir(username, numeric_id))
