from oidcmetadatalib.auth.exceptions.oidc_metadata_exception import (
    OidcMetadataException,
)


class MetadataTransportException(OidcMetadataException):
    """
    Raised by JsonService when a document cannot be fetched: network failure,
    non-2xx status, unexpected Content-Type or a body that is not a JSON object.
    """

    def __init__(
        self, *, message: str, url: str, status_code: int | None = None
    ) -> None:
        self.url: str = url
        self.status_code: int | None = status_code
        super().__init__(message=message)
