"""
Exceptions raised while building grids.
"""


class GridError(Exception):
    """Base class for grid construction errors."""
    pass


class ConstructionError(GridError):
    """Exception raised when a grid factory or assembler yields no grid."""
    pass


class SchemaError(GridError):
    """Exception raised when required keywords are missing from a deck."""
    pass
