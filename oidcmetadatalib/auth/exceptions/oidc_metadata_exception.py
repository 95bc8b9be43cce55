class OidcMetadataException(Exception):
    """Base class for errors raised while resolving OIDC metadata or signing keys."""

    def __init__(self, *, message: str) -> None:
        self.message: str = message
        super().__init__(message)
