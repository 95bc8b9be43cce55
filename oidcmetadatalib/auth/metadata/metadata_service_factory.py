import logging

from oidcmetadatalib.auth.config.oidc_client_settings import OidcClientSettings
from oidcmetadatalib.auth.config.oidc_client_settings_reader import (
    OidcClientSettingsReader,
)
from oidcmetadatalib.auth.http.json_service import JsonService
from oidcmetadatalib.auth.metadata.metadata_service import MetadataService
from oidcmetadatalib.utilities.environment.abstract_environment_variables import (
    AbstractEnvironmentVariables,
)
from oidcmetadatalib.utilities.environment.environment_variables import (
    EnvironmentVariables,
)
from oidcmetadatalib.utilities.environment.runtime_environment import (
    AbstractRuntimeEnvironment,
    DefaultRuntimeEnvironment,
)
from oidcmetadatalib.utilities.logger.log_levels import SRC_LOG_LEVELS

logger = logging.getLogger(__name__)
logger.setLevel(SRC_LOG_LEVELS["INITIALIZATION"])


class MetadataServiceFactory:
    # noinspection PyMethodMayBeStatic
    def create_metadata_service(
        self,
        *,
        environment_variables: AbstractEnvironmentVariables | None = None,
        settings: OidcClientSettings | None = None,
        runtime_environment: AbstractRuntimeEnvironment | None = None,
    ) -> MetadataService:
        """
        Wire a MetadataService. Anything not supplied is built from the process environment.

        :param environment_variables: source of settings and runtime options
        :param settings: explicit settings; when given they are used instead of the environment
        :param runtime_environment: timers/storage/location/network primitives
        :return: MetadataService
        """
        logger.info("Initializing MetadataService")

        environment_variables = environment_variables or EnvironmentVariables()
        if settings is None:
            settings = OidcClientSettingsReader(
                environment_variables=environment_variables
            ).read_settings()
        if runtime_environment is None:
            runtime_environment = DefaultRuntimeEnvironment(
                location=environment_variables.oidc_location,
                http_timeout_seconds=environment_variables.oidc_http_timeout_seconds,
            )

        metadata_service = MetadataService(
            settings=settings,
            json_service=JsonService(environment=runtime_environment),
        )
        logger.info(
            f"MetadataService initialized (metadata_url={metadata_service.metadata_url})"
        )
        return metadata_service
