"""
Custom exceptions for the record store layer.
"""


class StoreError(Exception):
    """Base class for failures reported by a record store."""
    pass


class StoreUnavailable(StoreError):
    """The backend could not be reached or answered with a server error."""
    pass


class RecordNotFound(StoreError):
    """No record with the requested internal id exists."""

    def __init__(self, table: str, internal_id: str):
        super().__init__(f"Record '{internal_id}' not found in {table}")
        self.table = table
        self.internal_id = internal_id


class DuplicateIdentifier(StoreError):
    """A display id is already taken in this table (concurrent allocation race)."""

    def __init__(self, table: str, display_id: str):
        super().__init__(f"Display id '{display_id}' already exists in {table}")
        self.table = table
        self.display_id = display_id
