from enum import StrEnum


class OidcMetadataProperty(StrEnum):
    """Well-known keys of an OpenID Connect discovery document."""

    ISSUER = "issuer"
    AUTHORIZATION_ENDPOINT = "authorization_endpoint"
    USERINFO_ENDPOINT = "userinfo_endpoint"
    TOKEN_ENDPOINT = "token_endpoint"
    CHECK_SESSION_IFRAME = "check_session_iframe"
    END_SESSION_ENDPOINT = "end_session_endpoint"
    REVOCATION_ENDPOINT = "revocation_endpoint"
    JWKS_URI = "jwks_uri"
