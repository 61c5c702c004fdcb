"""
Domain exceptions raised by the service layer and mapped to HTTP errors by routes
"""


class ResourceNotFoundException(Exception):
    """
    Raised when an update/delete/read targets a row that does not exist
    (or does not belong to the requesting user)
    """
    def __init__(self, resource: str, resource_id: str):
        self.resource = resource
        self.resource_id = resource_id
        self.message = f"{resource} not found: {resource_id}"
        super().__init__(self.message)


class StorageException(Exception):
    """
    Raised when an image upload/delete fails.
    The message is user-facing (French) and safe to return to the client.
    """
    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code
        super().__init__(self.message)


class SuggestionServiceException(Exception):
    """
    Raised when the remote AI function is unconfigured or answers with an error
    """
    def __init__(self, message: str = "AI suggestion service unavailable", status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class OutfitGenerationException(Exception):
    """
    Raised when an outfit cannot be generated (empty wardrobe, upstream failure)
    """
    def __init__(self, message: str = "Failed to generate outfit", upstream: bool = False):
        self.message = message
        self.upstream = upstream
        super().__init__(self.message)
