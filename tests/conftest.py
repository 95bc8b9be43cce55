"""
Shared test fixtures and utilities.
"""

from typing import Any, Dict, override

import pytest

from oidcmetadatalib.auth.config.oidc_client_settings import OidcClientSettings
from oidcmetadatalib.auth.http.json_service import JsonService
from oidcmetadatalib.auth.metadata.metadata_service import MetadataService
from oidcmetadatalib.utilities.environment.abstract_environment_variables import (
    AbstractEnvironmentVariables,
)
from oidcmetadatalib.utilities.environment.runtime_environment import (
    DefaultRuntimeEnvironment,
)

AUTHORITY = "https://issuer.example"
METADATA_URL = "https://issuer.example/.well-known/openid-configuration"
JWKS_URI = "https://issuer.example/jwks"


class MockEnvironmentVariables(AbstractEnvironmentVariables):
    """Mock environment variables for testing"""

    def __init__(
        self,
        *,
        authority: str | None = AUTHORITY,
        metadata_url: str | None = None,
        metadata: Dict[str, Any] | None = None,
        metadata_override: Dict[str, Any] | None = None,
        retry_failed_metadata_fetch: bool = False,
    ) -> None:
        self._authority = authority
        self._metadata_url = metadata_url
        self._metadata = metadata
        self._metadata_override = metadata_override
        self._retry_failed_metadata_fetch = retry_failed_metadata_fetch

    @property
    @override
    def oidc_authority(self) -> str | None:
        return self._authority

    @property
    @override
    def oidc_metadata_url(self) -> str | None:
        return self._metadata_url

    @property
    @override
    def oidc_metadata(self) -> Dict[str, Any] | None:
        return self._metadata

    @property
    @override
    def oidc_metadata_override(self) -> Dict[str, Any] | None:
        return self._metadata_override

    @property
    @override
    def oidc_retry_failed_metadata_fetch(self) -> bool:
        return self._retry_failed_metadata_fetch

    @property
    @override
    def oidc_http_timeout_seconds(self) -> float:
        return 5.0

    @property
    @override
    def oidc_location(self) -> str | None:
        return "https://app.example/callback"


def discovery_document(**extra: Any) -> Dict[str, Any]:
    document: Dict[str, Any] = {
        "issuer": AUTHORITY,
        "authorization_endpoint": f"{AUTHORITY}/authorize",
        "userinfo_endpoint": f"{AUTHORITY}/userinfo",
        "token_endpoint": f"{AUTHORITY}/token",
        "jwks_uri": JWKS_URI,
    }
    document.update(extra)
    return document


def create_metadata_service(settings: OidcClientSettings) -> MetadataService:
    return MetadataService(
        settings=settings,
        json_service=JsonService(environment=DefaultRuntimeEnvironment()),
    )


@pytest.fixture(scope="function")
def settings() -> OidcClientSettings:
    return OidcClientSettings(authority=AUTHORITY)


@pytest.fixture(scope="function")
def metadata_service(settings: OidcClientSettings) -> MetadataService:
    return create_metadata_service(settings)
