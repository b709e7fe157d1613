"""Error taxonomy shared by services and controllers."""


class NotFound(Exception):
    """Code, file or link is absent or no longer consumable."""


class Unauthorized(Exception):
    pass


class ConfigError(RuntimeError):
    """A required setting (such as ADMIN_SECRET) is missing."""


class StorageIOError(OSError):
    """Blob write or delete failed."""


class ValidationError(ValueError):
    pass


class MissingFile(ValidationError):
    def __init__(self):
        super().__init__("No file provided")


class MissingCode(ValidationError):
    def __init__(self):
        super().__init__("Upload code required")


class InvalidOrExpiredCode(ValidationError):
    def __init__(self):
        super().__init__("Invalid or expired upload code")


class FileTooLarge(ValidationError):
    def __init__(self, limit_mb: int):
        self.limit_mb = limit_mb
        super().__init__(f"File size exceeds {limit_mb}MB limit")
