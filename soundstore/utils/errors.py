class SoundStoreError(Exception):
    """Base error for the sound store. Carries the HTTP status and the message
    returned to the client as ``{"error": message}``."""

    status_code = 500
    kind = "SoundStoreError"
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingFile(SoundStoreError):
    status_code = 400
    kind = "MissingFile"
    default_message = "No sound file uploaded"


class InvalidType(SoundStoreError):
    status_code = 400
    kind = "InvalidType"
    default_message = "Please upload an audio file"


class FileTooLarge(SoundStoreError):
    status_code = 413
    kind = "FileTooLarge"
    default_message = "File too large"


class MissingId(SoundStoreError):
    status_code = 400
    kind = "MissingId"
    default_message = "No sound ID provided"


class PathTraversal(SoundStoreError):
    status_code = 403
    kind = "PathTraversal"
    default_message = "Invalid file path"


class NotFound(SoundStoreError):
    status_code = 404
    kind = "NotFound"
    default_message = "Sound file not found"


class StorageError(SoundStoreError):
    kind = "StorageError"
    default_message = "Failed to save file"


class UploadError(SoundStoreError):
    kind = "UploadError"
    default_message = "Failed to upload sound"


class ListError(SoundStoreError):
    kind = "IOError"
    default_message = "Failed to list sounds"


class DeleteError(SoundStoreError):
    kind = "DeleteError"
    default_message = "Failed to delete sound"
