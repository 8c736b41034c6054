# --------------------------------------------------------------------------- #
# MODULE DESCRIPTION                                                          #
# --------------------------------------------------------------------------- #
"""uidmapper Counter Module; contains UMCounter class.

The counter file is shared by every process that provisions users and lives
for as long as the deployment does. Nothing here ever resets it.
"""

import contextlib
import fcntl
import logging
import os
import re
import sys
import tempfile
import threading
import time

from uidmapper import umconfig
from uidmapper.umerror import CorruptState, LockTimeout, StoreUnavailable
from uidmapper.umopt import UMOpt

# --------------------------------------------------------------------------- #
# DATA                                                                        #
# --------------------------------------------------------------------------- #

logger = logging.getLogger(__name__)

# key, separator, value of a properties line.
RE_PROPERTY = re.compile(r'^\s*([^\s=:]+)\s*(?:[=:]\s*|\s+)(.*?)\s*$')
RE_NUMBER = re.compile(r'^[0-9]+$')

# POSIX record locks are owned by the process, so threads of one process
# also have to queue on a per-path lock of their own.
_THREAD_LOCKS = {}
_THREAD_LOCKS_GUARD = threading.Lock()

# --------------------------------------------------------------------------- #
# CLASSES                                                                     #
# --------------------------------------------------------------------------- #


class UMCounter:
    """Class to interface with the shared uidNumber counter file."""

    def __init__(self, path=None, opt=None):
        """Create new UMCounter object for the counter file at path."""

        self.opt = opt or UMOpt()
        self.path = path or self.opt.path
        self.lockpath = umconfig.gen_lockfile(self.path)

    # ------------------------------------------------------------------- #
    # COUNTER METHODS                                                     #
    # ------------------------------------------------------------------- #

    def next_id(self):
        """Allocate the next uidNumber.

        Locks the counter, reads nextId, writes back nextId + 1 and returns
        the new value. Every caller gets a distinct value. Nothing is
        written if reading fails, and nothing at all in test mode.
        """

        with self.lock():
            lines, index, current = self.read()
            next_id = current + 1
            if self.opt.test:
                sys.stderr.write("TEST: %s: %s=%d\n" %
                                 (self.path, umconfig.UIDNUMBER_KEY, next_id))
            else:
                lines[index] = '%s=%d\n' % (umconfig.UIDNUMBER_KEY, next_id)
                self.write(lines)
        logger.info('Allocated uidNumber %d from %s', next_id, self.path)
        return next_id

    def current(self):
        """Return the value of nextId, read under the lock."""

        with self.lock():
            return self.read()[2]

    @classmethod
    def create(cls, path, value, opt=None):
        """Create a counter file at path holding nextId=value.

        An existing file is replaced atomically, so this is safe to run
        while mappers are live, but it can hand out ids again if value is
        lower than the current one.
        """

        if value < 0:
            raise CorruptState('nextId must not be negative: %d' % value)
        counter = cls(path, opt)
        with counter.lock():
            counter.write(['%s=%d\n' % (umconfig.UIDNUMBER_KEY, value)])
        return counter

    # ------------------------------------------------------------------ #
    # INTERNAL METHODS                                                   #
    # ------------------------------------------------------------------ #

    @contextlib.contextmanager
    def lock(self):
        """Hold exclusive access to the counter for the with block.

        Polls for a POSIX lock on the lock file beside the counter until
        opt.lock_timeout runs out, then raises LockTimeout.
        """

        deadline = time.monotonic() + self.opt.lock_timeout
        thread_lock = self.thread_lock()
        if not thread_lock.acquire(timeout=self.opt.lock_timeout):
            raise LockTimeout('Could not lock %s within %s seconds' %
                              (self.path, self.opt.lock_timeout))
        try:
            try:
                fd = os.open(self.lockpath, os.O_RDWR | os.O_CREAT, 0o644)
            except OSError as err:
                raise StoreUnavailable('Could not open lock file %s: %s' %
                                       (self.lockpath, err.strerror))
            try:
                retries = 0
                while 1:
                    try:
                        fcntl.lockf(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
                    except OSError:
                        retries += 1
                        if time.monotonic() >= deadline:
                            raise LockTimeout(
                                'Could not lock %s after %d attempts' %
                                (self.path, retries))
                        logger.debug('%s is locked, retrying', self.path)
                        time.sleep(umconfig.LOCK_INTERVAL)
                    else:
                        break
                try:
                    yield
                finally:
                    fcntl.lockf(fd, fcntl.LOCK_UN)
            finally:
                os.close(fd)
        finally:
            thread_lock.release()

    def thread_lock(self):
        """Return the in-process lock shared by all counters on this path."""

        key = os.path.realpath(self.path)
        with _THREAD_LOCKS_GUARD:
            return _THREAD_LOCKS.setdefault(key, threading.Lock())

    def read(self):
        """read() -> lines, index, value

        Read the counter file. Returns its lines, the index of the nextId
        line and its value."""

        try:
            with open(self.path, 'r') as counter_file:
                lines = counter_file.readlines()
        except OSError as err:
            raise StoreUnavailable('Could not read %s: %s' %
                                   (self.path, err.strerror))
        if not os.access(self.path, os.W_OK):
            raise StoreUnavailable('Could not write %s: Permission denied' %
                                   self.path)

        for index, line in enumerate(lines):
            if line.lstrip().startswith(('#', '!')):
                continue
            res = RE_PROPERTY.match(line)
            if res and res.group(1) == umconfig.UIDNUMBER_KEY:
                if not RE_NUMBER.match(res.group(2)):
                    raise CorruptState("Invalid %s value '%s' in %s" %
                                       (umconfig.UIDNUMBER_KEY, res.group(2),
                                        self.path))
                return lines, index, int(res.group(2))
        raise CorruptState('No %s entry in %s' %
                           (umconfig.UIDNUMBER_KEY, self.path))

    def write(self, lines):
        """Replace the counter file with lines.

        Writes a temporary file in the same directory, syncs it and renames
        it over the counter so a crash leaves either the old or the new
        file, never a truncated one."""

        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            mode = os.stat(self.path).st_mode & 0o7777
        except FileNotFoundError:
            mode = 0o644
        except OSError as err:
            raise StoreUnavailable('Could not stat %s: %s' %
                                   (self.path, err.strerror))
        try:
            fd, tmppath = tempfile.mkstemp(
                dir=directory, prefix='.%s.' % os.path.basename(self.path))
        except OSError as err:
            raise StoreUnavailable('Could not write %s: %s' %
                                   (self.path, err.strerror))
        try:
            with os.fdopen(fd, 'w') as tmp_file:
                tmp_file.writelines(lines)
                tmp_file.flush()
                os.fsync(tmp_file.fileno())
            os.chmod(tmppath, mode)
            os.replace(tmppath, self.path)
        except OSError as err:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmppath)
            raise StoreUnavailable('Could not write %s: %s' %
                                   (self.path, err.strerror))
        self.sync_directory(directory)

    @classmethod
    def sync_directory(cls, directory):
        """Flush the rename of the counter file to disk."""

        try:
            dir_fd = os.open(directory, os.O_RDONLY)
        except OSError:
            return
        try:
            os.fsync(dir_fd)
        except OSError:
            # Some filesystems (NFS among them) refuse fsync on directories.
            pass
        finally:
            os.close(dir_fd)
