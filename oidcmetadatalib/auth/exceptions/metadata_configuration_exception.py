from oidcmetadatalib.auth.exceptions.oidc_metadata_exception import (
    OidcMetadataException,
)


class MetadataConfigurationException(OidcMetadataException):
    """
    The client settings cannot produce a discovery document: no authority, no
    metadata URL and no seeded metadata, or a malformed configured value.
    """
