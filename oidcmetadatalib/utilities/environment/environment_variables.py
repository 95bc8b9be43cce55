import json
import os
from typing import Any, Dict, override

from oidcmetadatalib.auth.exceptions.metadata_configuration_exception import (
    MetadataConfigurationException,
)
from oidcmetadatalib.utilities.environment.abstract_environment_variables import (
    AbstractEnvironmentVariables,
)

DEFAULT_HTTP_TIMEOUT_SECONDS: float = 10.0


class EnvironmentVariables(AbstractEnvironmentVariables):
    """Reads OIDC client settings from ``os.environ``."""

    @property
    @override
    def oidc_authority(self) -> str | None:
        return os.environ.get("OIDC_AUTHORITY") or None

    @property
    @override
    def oidc_metadata_url(self) -> str | None:
        return os.environ.get("OIDC_METADATA_URL") or None

    @property
    @override
    def oidc_metadata(self) -> Dict[str, Any] | None:
        return self._read_json_object("OIDC_METADATA")

    @property
    @override
    def oidc_metadata_override(self) -> Dict[str, Any] | None:
        return self._read_json_object("OIDC_METADATA_OVERRIDE")

    @property
    @override
    def oidc_retry_failed_metadata_fetch(self) -> bool:
        value = os.environ.get("OIDC_RETRY_FAILED_METADATA_FETCH", "")
        return value.strip().lower() in ("1", "true", "yes", "on")

    @property
    @override
    def oidc_http_timeout_seconds(self) -> float:
        value = os.environ.get("OIDC_HTTP_TIMEOUT_SECONDS")
        if not value:
            return DEFAULT_HTTP_TIMEOUT_SECONDS
        try:
            return float(value)
        except ValueError as e:
            raise MetadataConfigurationException(
                message=f"OIDC_HTTP_TIMEOUT_SECONDS must be a number, got {value!r}"
            ) from e

    @property
    @override
    def oidc_location(self) -> str | None:
        return os.environ.get("OIDC_LOCATION") or None

    @staticmethod
    def _read_json_object(name: str) -> Dict[str, Any] | None:
        value = os.environ.get(name)
        if not value:
            return None
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError as e:
            raise MetadataConfigurationException(
                message=f"{name} is not valid JSON: {e}"
            ) from e
        if not isinstance(parsed, dict):
            raise MetadataConfigurationException(
                message=f"{name} must be a JSON object, got {type(parsed).__name__}"
            )
        return parsed
