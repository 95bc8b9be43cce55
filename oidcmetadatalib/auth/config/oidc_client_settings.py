from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict


class OidcClientSettings(BaseModel):
    """
    Client settings shared by the caller and MetadataService.

    The instance is owned by the caller. MetadataService mutates it in exactly two ways:
    - ``metadata`` receives the merged discovery document (updated in place, so holders
      of the dict observe the merge).
    - ``signing_keys`` is set after a JWKS fetch and cleared by ``reset_signing_keys``.
    ``metadata_override`` is only ever read.
    """

    model_config = ConfigDict(validate_assignment=False)

    authority: str | None = None
    """Issuer base URL; the discovery URL is derived from it."""
    metadata_url: str | None = None
    """Explicit discovery document URL; takes precedence over ``authority``."""
    metadata: Dict[str, Any] | None = None
    """
    Seeded discovery document, and the target of the merge once fetched.

    pydantic copies the dict given to the constructor; read ``settings.metadata`` (not the
    dict you passed in) to see the merged document.
    """
    metadata_override: Dict[str, Any] | None = None
    """Values that always win over the fetched document."""
    signing_keys: List[Dict[str, Any]] | None = None
    """Cached JWKS ``keys``; ``None`` means they must be fetched."""
    retry_failed_metadata_fetch: bool = False
    """Start a new discovery fetch after a failed one instead of re-raising the cached failure."""
