# --------------------------------------------------------------------------- #
# MODULE DESCRIPTION                                                          #
# --------------------------------------------------------------------------- #
"""uidmapper Error Module; contains uidmapper exception classes."""

# --------------------------------------------------------------------------- #
# CLASSES                                                                     #
# --------------------------------------------------------------------------- #


class UMError(Exception):
    """Base class for uidmapper exceptions"""

    def __init__(self, mesg):
        """Create new UMError object with given error message."""
        super().__init__(mesg)
        self.mesg = mesg

    def __str__(self):
        """Return exception error message."""
        return "ERROR: %s" % self.mesg


class UMFatalError(UMError):
    """Class for fatal uidmapper exceptions"""

    def __str__(self):
        """Return exception error message."""
        return "FATAL: %s" % self.mesg


class UMWarningError(UMError):
    """Class for warning uidmapper exceptions. These do not abort a
    provisioning attempt."""

    def __str__(self):
        """Return exception error message."""
        return "WARNING: %s" % self.mesg


class UMConfigError(UMFatalError):
    """Mapper configuration is missing or malformed."""


class StoreUnavailable(UMFatalError):
    """Counter file cannot be opened for reading or writing."""


class CorruptState(UMFatalError):
    """Counter file holds no parseable nextId value."""


class LockTimeout(UMFatalError):
    """Exclusive access to the counter file was not obtained in time."""


class ExternalProcessFailure(UMWarningError):
    """Scheduler registration could not be launched or exited abnormally."""
