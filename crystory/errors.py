"""Exception types"""


class CrystoryError(Exception):
    """Base error for crystory"""


class EnumerationError(CrystoryError):
    """A topology or mount query failed or returned malformed data"""


class PersistenceError(CrystoryError):
    """The UUID marker file could not be read or written"""


class MarkerAttributeError(CrystoryError):
    """The hidden attribute could not be applied to the marker file"""
