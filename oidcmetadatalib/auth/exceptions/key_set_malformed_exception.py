from oidcmetadatalib.auth.exceptions.oidc_metadata_exception import (
    OidcMetadataException,
)


class KeySetMalformedException(OidcMetadataException):
    """The JWKS document has no usable ``keys`` list."""

    def __init__(self, *, jwks_uri: str) -> None:
        self.jwks_uri: str = jwks_uri
        super().__init__(message=f"Missing keys on keyset from {jwks_uri}")
