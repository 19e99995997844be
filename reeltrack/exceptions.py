"""Service-layer exceptions"""


class ValidationError(ValueError):
    """Malformed or empty caller input"""


class NotFoundError(LookupError):
    """Entry does not exist or belongs to another user"""

    def __init__(self, message: str = "Entry not found"):
        super().__init__(message)


class StoreError(RuntimeError):
    """Underlying persistence failure"""

    def __init__(self, operation: str):
        super().__init__(f"Store failure during {operation}")
        self.operation = operation
