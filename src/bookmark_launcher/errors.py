class LauncherError(Exception):
    """Base class for bookmark launcher errors."""


class ValidationError(LauncherError, ValueError):
    pass


class NotFoundError(LauncherError, LookupError):
    def __init__(self, kind: str, item_id):
        super().__init__(f"{kind} not found: {item_id}")
        self.kind = kind
        self.item_id = item_id
