from abc import ABC, abstractmethod
from typing import Any, Dict


class AbstractEnvironmentVariables(ABC):
    """Settings a relying party supplies through its environment."""

    @property
    @abstractmethod
    def oidc_authority(self) -> str | None: ...

    @property
    @abstractmethod
    def oidc_metadata_url(self) -> str | None: ...

    @property
    @abstractmethod
    def oidc_metadata(self) -> Dict[str, Any] | None: ...

    @property
    @abstractmethod
    def oidc_metadata_override(self) -> Dict[str, Any] | None: ...

    @property
    @abstractmethod
    def oidc_retry_failed_metadata_fetch(self) -> bool: ...

    @property
    @abstractmethod
    def oidc_http_timeout_seconds(self) -> float: ...

    @property
    @abstractmethod
    def oidc_location(self) -> str | None: ...
