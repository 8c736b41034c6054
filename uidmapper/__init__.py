"""Username and uidNumber allocation for newly brokered users."""

__version__ = '1.0.0'
