"""
repositories/exceptions.py
--------------------------
The single error kind raised by the data access layer.
"""


class DataAccessError(RuntimeError):
    """
    Raised when a query fails or a row cannot be mapped to a domain object.

    The low-level exception is kept as ``__cause__``.

    Attributes:
        operation: Name of the repository operation that failed (e.g. 'get_by_id').
    """

    def __init__(self, operation: str, message: str = ""):
        self.operation = operation
        super().__init__(f"Something went wrong at {operation}" + (f": {message}" if message else ""))
