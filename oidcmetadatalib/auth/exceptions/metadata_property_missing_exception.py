from oidcmetadatalib.auth.exceptions.oidc_metadata_exception import (
    OidcMetadataException,
)


class MetadataPropertyMissingException(OidcMetadataException):
    """A required property is absent from the discovery document."""

    def __init__(self, *, property_name: str) -> None:
        self.property_name: str = property_name
        super().__init__(
            message=f"Metadata does not contain property {property_name}"
        )
