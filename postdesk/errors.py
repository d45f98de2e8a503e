class MalformedInputError(ValueError):
    """Raised when a write request is missing a required field."""


class PostNotFoundError(LookupError):
    """Raised when an identifier does not resolve to a stored post file."""

    def __init__(self, identifier: str):
        super().__init__(f"No post matches '{identifier}'")
        self.identifier = identifier


class PostWriteError(RuntimeError):
    """Raised when a post file could not be written. Existing files are untouched."""


class PartialWriteError(RuntimeError):
    """Raised when a renamed post was written but its old file could not be removed."""

    def __init__(self, old_filename: str, new_filename: str, reason: str):
        super().__init__(
            f"Wrote {new_filename} but failed to remove {old_filename}: {reason}"
        )
        self.old_filename = old_filename
        self.new_filename = new_filename


class ImageUploadError(ValueError):
    """Raised when an uploaded file is rejected (type or size)."""


class ImageNotFoundError(LookupError):
    """Raised when an image path or directory does not exist."""


class PostConflictError(RuntimeError):
    """Raised when an update would overwrite a different stored post."""

    def __init__(self, filename: str):
        super().__init__(f"Another post is already stored as {filename}")
        self.filename = filename
