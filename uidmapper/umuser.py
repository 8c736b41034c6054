# --------------------------------------------------------------------------- #
# MODULE DESCRIPTION                                                          #
# --------------------------------------------------------------------------- #
"""uidmapper User Module; contains UMUser class."""

# --------------------------------------------------------------------------- #
# CLASSES                                                                     #
# --------------------------------------------------------------------------- #


class UMUser:
    """Class to represent a user being provisioned.

    Besides holding the account attributes, a UMUser is the record writer
    the mapper fills in: set_username() and set_attribute().
    """

    # List of valid LDAP attributes for a user. The order of these is used
    # when displaying a user's information.
    #
    attr_list = (
        'uid',                  # Username
        'cn',                   # Full name
        'objectClass',          # List of classes.

        # Attributes associated with Unix account.

        'uidNumber',
        'gidNumber',
        'homeDirectory',
        'loginShell',
    )

    # List of attributes that have multiple values (i.e. are lists).
    #
    attr_list_value = (
        'objectClass',
    )

    def __init__(self, usr=None, **attrs):
        """Create new UMUser object.

        If the optional usr argument is a UMUser object, its attributes are
        copied to the new object. Keywords override copied data. Any
        remaining unset attributes are set to None."""

        for i in self.attr_list:
            if i in attrs:
                setattr(self, i, attrs[i])
            elif isinstance(usr, UMUser):
                setattr(self, i, getattr(usr, i))
            else:
                setattr(self, i, None)

    def __str__(self):
        """Return the user's attributes, one per line."""

        return ''.join('%-18s:  %s\n' % (i, getattr(self, i))
                       for i in self.attr_list
                       if getattr(self, i) is not None)

    def set_username(self, username):
        """Set the user's login name."""

        self.uid = username

    def set_attribute(self, name, value):
        """Set a single valued account attribute."""

        if name not in self.attr_list or name in self.attr_list_value:
            raise KeyError("Unknown single valued attribute '%s'" % name)
        setattr(self, name, value)
