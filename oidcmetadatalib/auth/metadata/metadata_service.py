import logging
from typing import Any, Dict, List, cast

from joserfc.jwk import KeySet
from opentelemetry import trace

from oidcmetadatalib.auth.config.oidc_client_settings import OidcClientSettings
from oidcmetadatalib.auth.exceptions.key_set_malformed_exception import (
    KeySetMalformedException,
)
from oidcmetadatalib.auth.exceptions.metadata_configuration_exception import (
    MetadataConfigurationException,
)
from oidcmetadatalib.auth.exceptions.metadata_property_missing_exception import (
    MetadataPropertyMissingException,
)
from oidcmetadatalib.auth.exceptions.metadata_transport_exception import (
    MetadataTransportException,
)
from oidcmetadatalib.auth.http.json_service import JsonService
from oidcmetadatalib.auth.metadata.metadata_cache_state import (
    MetadataCacheState,
    MetadataCacheStatus,
)
from oidcmetadatalib.auth.models.oidc_metadata_property import OidcMetadataProperty
from oidcmetadatalib.open_telemetry.attribute_names import (
    OidcMetadataOpenTelemetryAttributeNames,
)
from oidcmetadatalib.open_telemetry.span_names import (
    OidcMetadataOpenTelemetrySpanNames,
)
from oidcmetadatalib.utilities.logger.log_levels import SRC_LOG_LEVELS

logger = logging.getLogger(__name__)
logger.setLevel(SRC_LOG_LEVELS["AUTH"])

OIDC_METADATA_URL_PATH: str = ".well-known/openid-configuration"
JWK_SET_CONTENT_TYPE: str = "application/jwk-set+json"


class MetadataService:
    """Resolves and caches the OIDC discovery document and signing keys of one provider.

    Responsibilities:
    - Derive the discovery URL from the settings (explicit metadata_url, else authority).
    - Fetch the discovery document at most once, coalescing concurrent callers.
    - Merge seeded metadata, the fetched document and metadata_override (later wins)
      into ``settings.metadata``.
    - Look up discovery properties with required/optional semantics.
    - Fetch the JWKS from ``jwks_uri`` and cache its keys in ``settings.signing_keys``.

    Caching:
    - The discovery fetch outcome is cached for the lifetime of this instance, failures
      included. Construct a new instance (or enable
      ``settings.retry_failed_metadata_fetch``) to try again after a failure.
    - Signing keys live in the settings and are cleared independently via
      ``reset_signing_keys()``; the discovery document stays cached.

    Notes:
    - One MetadataService owns the metadata lifecycle of a given settings instance.
    - Every failure is logged at error level before it propagates.
    """

    def __init__(
        self, *, settings: OidcClientSettings, json_service: JsonService
    ) -> None:
        if settings is None:
            logger.error("MetadataService: No settings passed to MetadataService")
            raise ValueError("settings must be provided")
        if not isinstance(settings, OidcClientSettings):
            raise TypeError(
                f"settings must be an instance of OidcClientSettings, got {type(settings).__name__}"
            )
        if json_service is None:
            raise ValueError("json_service must be provided")
        if not isinstance(json_service, JsonService):
            raise TypeError(
                f"json_service must be an instance of JsonService, got {type(json_service).__name__}"
            )

        self._settings: OidcClientSettings = settings
        self._json_service: JsonService = json_service
        self._metadata_url: str | None = None
        self._metadata_url_resolved: bool = False
        self._metadata_cache: MetadataCacheState = MetadataCacheState()

    @property
    def settings(self) -> OidcClientSettings:
        return self._settings

    @property
    def metadata_cache_status(self) -> MetadataCacheStatus:
        return self._metadata_cache.status

    @property
    def metadata_url(self) -> str | None:
        """Discovery document URL, computed on first access and memoized."""
        if not self._metadata_url_resolved:
            self._metadata_url = self.derive_metadata_url(
                metadata_url=self._settings.metadata_url,
                authority=self._settings.authority,
            )
            self._metadata_url_resolved = True
        return self._metadata_url

    @staticmethod
    def derive_metadata_url(
        *, metadata_url: str | None, authority: str | None
    ) -> str | None:
        if metadata_url:
            return metadata_url
        if not authority:
            return None
        if OIDC_METADATA_URL_PATH in authority:
            return authority
        if not authority.endswith("/"):
            authority += "/"
        return authority + OIDC_METADATA_URL_PATH

    async def get_metadata_async(self) -> Dict[str, Any]:
        """Return the effective discovery document.

        Returns:
            Dict[str, Any]: ``settings.metadata`` after merging; the same dict on every call.
        Raises:
            MetadataConfigurationException: No URL can be derived and nothing is seeded.
            MetadataTransportException: The (cached) discovery fetch failed.
        """
        metadata_url = self.metadata_url

        if not metadata_url and self._settings.metadata is not None:
            logger.debug("Returning metadata from settings")
            return self._settings.metadata

        if not metadata_url:
            logger.error("No authority or metadata_url configured on settings")
            raise MetadataConfigurationException(
                message="No authority or metadata_url configured on settings"
            )

        if (
            self._settings.retry_failed_metadata_fetch
            and self._metadata_cache.failed
        ):
            logger.warning(
                f"Previous metadata fetch from {metadata_url} failed; retrying"
            )
            self._metadata_cache.reset()

        if self._metadata_cache.status is MetadataCacheStatus.EMPTY:
            logger.debug(f"Getting metadata from {metadata_url}")
        else:
            logger.debug(
                f"Getting metadata from cache ({self._metadata_cache.status.value}) for {metadata_url}"
            )

        self._metadata_cache.get_or_start(
            lambda: self._fetch_metadata_async(metadata_url=metadata_url)
        )
        return await self._metadata_cache.wait_async()

    async def _fetch_metadata_async(self, *, metadata_url: str) -> Dict[str, Any]:
        tracer = trace.get_tracer(__name__)
        with tracer.start_as_current_span(
            OidcMetadataOpenTelemetrySpanNames.FETCH_DISCOVERY_DOCUMENT,
            attributes={
                OidcMetadataOpenTelemetryAttributeNames.METADATA_URL: metadata_url
            },
        ):
            try:
                fetched = await self._json_service.get_json_async(url=metadata_url)
            except MetadataTransportException as e:
                logger.error(f"Failed to fetch metadata from {metadata_url}: {e}")
                raise
            logger.debug(f"Metadata json received from {metadata_url}")
            return self._merge_metadata(fetched=fetched)

    def _merge_metadata(self, *, fetched: Dict[str, Any]) -> Dict[str, Any]:
        # Updated in place: settings.metadata is the merged document and holders of
        # settings.metadata see the result.
        if self._settings.metadata is None:
            self._settings.metadata = {}
        merged = self._settings.metadata
        merged.update(fetched)
        if self._settings.metadata_override:
            merged.update(self._settings.metadata_override)
        return merged

    async def get_issuer_async(self) -> str:
        return cast(
            str, await self._get_metadata_property_async(name=OidcMetadataProperty.ISSUER)
        )

    async def get_authorization_endpoint_async(self) -> str:
        return cast(
            str,
            await self._get_metadata_property_async(
                name=OidcMetadataProperty.AUTHORIZATION_ENDPOINT
            ),
        )

    async def get_user_info_endpoint_async(self) -> str:
        return cast(
            str,
            await self._get_metadata_property_async(
                name=OidcMetadataProperty.USERINFO_ENDPOINT
            ),
        )

    async def get_token_endpoint_async(self, *, optional: bool = True) -> str | None:
        # Implicit-flow-only providers may not publish a token endpoint.
        return cast(
            str | None,
            await self._get_metadata_property_async(
                name=OidcMetadataProperty.TOKEN_ENDPOINT, optional=optional
            ),
        )

    async def get_check_session_iframe_async(self) -> str | None:
        return cast(
            str | None,
            await self._get_metadata_property_async(
                name=OidcMetadataProperty.CHECK_SESSION_IFRAME, optional=True
            ),
        )

    async def get_end_session_endpoint_async(self) -> str | None:
        return cast(
            str | None,
            await self._get_metadata_property_async(
                name=OidcMetadataProperty.END_SESSION_ENDPOINT, optional=True
            ),
        )

    async def get_revocation_endpoint_async(self) -> str | None:
        return cast(
            str | None,
            await self._get_metadata_property_async(
                name=OidcMetadataProperty.REVOCATION_ENDPOINT, optional=True
            ),
        )

    async def get_keys_endpoint_async(self) -> str | None:
        return cast(
            str | None,
            await self._get_metadata_property_async(
                name=OidcMetadataProperty.JWKS_URI, optional=True
            ),
        )

    async def _get_metadata_property_async(
        self, *, name: str, optional: bool = False
    ) -> Any:
        logger.debug(f"Getting metadata property: {name}")
        metadata = await self.get_metadata_async()

        # Absent means the key is missing; a present null or empty value is returned as is.
        if name not in metadata:
            if optional:
                logger.warning(f"Metadata does not contain optional property {name}")
                return None
            logger.error(f"Metadata does not contain property {name}")
            raise MetadataPropertyMissingException(property_name=name)

        return metadata[name]

    async def get_signing_keys_async(self) -> List[Dict[str, Any]]:
        """Return the JWKS keys, fetching them from ``jwks_uri`` when not cached.

        Returns:
            List[Dict[str, Any]]: The ``keys`` of the key set, also stored in
            ``settings.signing_keys``.
        Raises:
            MetadataPropertyMissingException: The discovery document has no jwks_uri.
            KeySetMalformedException: The key set has no ``keys`` list.
            MetadataTransportException: The discovery or key set fetch failed.
        """
        if self._settings.signing_keys is not None:
            logger.debug("Returning signing keys from settings")
            return self._settings.signing_keys

        jwks_uri = cast(
            str,
            await self._get_metadata_property_async(name=OidcMetadataProperty.JWKS_URI),
        )
        if not jwks_uri:
            logger.error(f"Metadata property jwks_uri is empty: {jwks_uri!r}")
            raise MetadataPropertyMissingException(
                property_name=OidcMetadataProperty.JWKS_URI
            )
        logger.debug(f"jwks_uri received: {jwks_uri}")

        tracer = trace.get_tracer(__name__)
        with tracer.start_as_current_span(
            OidcMetadataOpenTelemetrySpanNames.FETCH_SIGNING_KEYS,
            attributes={OidcMetadataOpenTelemetryAttributeNames.JWKS_URI: jwks_uri},
        ) as span:
            try:
                key_set = await self._json_service.get_json_async(
                    url=jwks_uri, additional_content_types=[JWK_SET_CONTENT_TYPE]
                )
            except MetadataTransportException as e:
                logger.error(f"Failed to fetch key set from {jwks_uri}: {e}")
                raise

            keys = key_set.get("keys")
            if not isinstance(keys, list):
                logger.error(f"Missing keys on keyset from {jwks_uri}")
                raise KeySetMalformedException(jwks_uri=jwks_uri)

            span.set_attribute(
                OidcMetadataOpenTelemetryAttributeNames.JWKS_KEY_COUNT, len(keys)
            )
            logger.info(f"Fetched {len(keys)} signing keys from {jwks_uri}")
            self._settings.signing_keys = keys
            return keys

    def reset_signing_keys(self) -> None:
        """Drop cached signing keys; the discovery document stays cached."""
        logger.debug("Resetting signing keys")
        self._settings.signing_keys = None

    async def get_signing_key_set_async(self) -> KeySet:
        """Return the signing keys imported as a joserfc KeySet for token verification."""
        keys = await self.get_signing_keys_async()
        return KeySet.import_key_set({"keys": keys})

    async def get_signing_key_for_kid_async(
        self, *, kid: str | None
    ) -> Dict[str, Any] | None:
        """
        Returns the signing key whose ``kid`` matches, or None.

        :param kid: Key ID from a token header
        :return:
        """
        if kid is None:
            return None
        for key in await self.get_signing_keys_async():
            if key.get("kid") == kid:
                return key
        logger.warning(f"No signing key found for kid: {kid}")
        return None
