from enum import StrEnum


class OidcMetadataOpenTelemetrySpanNames(StrEnum):
    FETCH_DISCOVERY_DOCUMENT = "oidcmetadatalib.fetch_discovery_document"
    FETCH_SIGNING_KEYS = "oidcmetadatalib.fetch_signing_keys"
