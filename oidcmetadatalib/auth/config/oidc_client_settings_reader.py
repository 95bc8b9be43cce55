import logging

from oidcmetadatalib.auth.config.oidc_client_settings import OidcClientSettings
from oidcmetadatalib.utilities.environment.abstract_environment_variables import (
    AbstractEnvironmentVariables,
)
from oidcmetadatalib.utilities.logger.log_levels import SRC_LOG_LEVELS

logger = logging.getLogger(__name__)
logger.setLevel(SRC_LOG_LEVELS["INITIALIZATION"])


class OidcClientSettingsReader:
    """
    Builds OidcClientSettings from environment variables.
    """

    def __init__(self, *, environment_variables: AbstractEnvironmentVariables):
        self.environment_variables: AbstractEnvironmentVariables = (
            environment_variables
        )
        if self.environment_variables is None:
            raise ValueError("environment_variables must be provided")
        if not isinstance(self.environment_variables, AbstractEnvironmentVariables):
            raise TypeError(
                "environment_variables must be an instance of AbstractEnvironmentVariables"
            )

    def read_settings(self) -> OidcClientSettings:
        settings = OidcClientSettings(
            authority=self.environment_variables.oidc_authority,
            metadata_url=self.environment_variables.oidc_metadata_url,
            metadata=self.environment_variables.oidc_metadata,
            metadata_override=self.environment_variables.oidc_metadata_override,
            retry_failed_metadata_fetch=self.environment_variables.oidc_retry_failed_metadata_fetch,
        )
        if not settings.authority and not settings.metadata_url:
            logger.warning(
                "Neither OIDC_AUTHORITY nor OIDC_METADATA_URL is set; "
                "only seeded metadata can be used."
            )
        logger.debug(
            f"Read OIDC client settings: authority={settings.authority}, "
            f"metadata_url={settings.metadata_url}, "
            f"seeded_metadata={settings.metadata is not None}, "
            f"override_keys={sorted(settings.metadata_override or {})}"
        )
        return settings
