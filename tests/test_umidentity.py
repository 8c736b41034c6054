"""uidmapper Test Module; Tests username and home directory derivation."""

import unittest

from tests import data_umidentity as data
from uidmapper import umconfig
from uidmapper.umidentity import DerivedIdentity, derive


class DeriveTestCase(unittest.TestCase):
    """Test Case class for derive"""

    def test_examples(self):
        """Known ids map to known usernames and home directories"""
        for numeric_id, prefix, username, home in data.DERIVED:
            with self.subTest(numeric_id=numeric_id, prefix=prefix):
                self.assertEqual(derive(numeric_id, prefix),
                                 DerivedIdentity(numeric_id, username, home))

    def test_fields(self):
        """Fields are reachable by name"""
        identity = derive(1234, 'user')
        self.assertEqual(identity.numericId, 1234)
        self.assertEqual(identity.username, 'user1234')
        self.assertEqual(identity.homeDirectory, '/home/vol04/user1234')

    def test_repeatable(self):
        """Same input, same output"""
        self.assertEqual(derive(987654, 'hpc'), derive(987654, 'hpc'))

    def test_short_ids_padded(self):
        """Ids under four digits are zero-padded"""
        self.assertEqual(derive(7, 'user').username, 'user0007')
        self.assertEqual(derive(42, 'user').username, 'user0042')
        self.assertEqual(derive(999, 'user').username, 'user0999')

    def test_volume_is_last_digit(self):
        """Home volume follows the last digit of the id"""
        for last in range(10):
            numeric_id = 5000 + last
            self.assertTrue(
                derive(numeric_id, 'u').homeDirectory.startswith(
                    '/home/vol0%d/' % last))

    def test_negative(self):
        """Negative ids are rejected"""
        self.assertRaises(ValueError, derive, -1, 'user')

    def test_not_integer(self):
        """Non integer ids are rejected"""
        self.assertRaises(TypeError, derive, '1234', 'user')
        self.assertRaises(TypeError, derive, True, 'user')


class ConfigGeneratorTestCase(unittest.TestCase):
    """Test Case class for umconfig path generators"""

    def test_gen_username(self):
        self.assertEqual(umconfig.gen_username('x', 123456), 'x3456')

    def test_gen_homedir(self):
        self.assertEqual(umconfig.gen_homedir('x3456', 123456),
                         '/home/vol06/x3456')

    def test_gen_lockfile(self):
        self.assertEqual(umconfig.gen_lockfile('/srv/uid.properties'),
                         '/srv/uid.properties.lock')


if __name__ == "__main__":
    unittest.main()  # run all tests
