"""Error taxonomy shared by the stores, the rating engine and the API layer."""


class FoosballError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(FoosballError):
    """Client-supplied data failed validation."""

    status_code = 400


class DuplicateName(InvalidInput):
    pass


class NotFound(FoosballError):
    """A referenced player does not exist."""

    status_code = 404


class StorageFailure(FoosballError):
    """The underlying database read or write failed."""

    status_code = 500
