class OidcMetadataOpenTelemetryAttributeNames:
    # Discovery / JWKS attributes
    METADATA_URL: str = "oidc.metadata.url"
    JWKS_URI: str = "oidc.jwks.uri"
    JWKS_KEY_COUNT: str = "oidc.jwks.key_count"
