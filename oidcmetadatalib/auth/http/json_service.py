import logging
from typing import Any, Dict, List, Sequence

import httpx
from httpx import ConnectError

from oidcmetadatalib.auth.exceptions.metadata_transport_exception import (
    MetadataTransportException,
)
from oidcmetadatalib.utilities.environment.runtime_environment import (
    AbstractRuntimeEnvironment,
)
from oidcmetadatalib.utilities.logger.log_levels import SRC_LOG_LEVELS

logger = logging.getLogger(__name__)
logger.setLevel(SRC_LOG_LEVELS["HTTP"])

JSON_CONTENT_TYPE: str = "application/json"


class JsonService:
    """
    Fetches JSON documents over HTTP GET.

    A response is accepted only when its status is 2xx and its Content-Type starts with
    ``application/json`` or one of the additional content types supplied by the caller.
    Every failure surfaces as MetadataTransportException; retries and backoff are not
    attempted here.
    """

    def __init__(self, *, environment: AbstractRuntimeEnvironment) -> None:
        self._environment: AbstractRuntimeEnvironment = environment
        if self._environment is None:
            raise ValueError("environment must be provided")
        if not isinstance(self._environment, AbstractRuntimeEnvironment):
            raise TypeError(
                f"environment must be an instance of AbstractRuntimeEnvironment, got {type(self._environment).__name__}"
            )

    async def get_json_async(
        self, *, url: str, additional_content_types: Sequence[str] | None = None
    ) -> Dict[str, Any]:
        """Fetch ``url`` and return its body parsed as a JSON object.

        Args:
            url: Absolute URL of the document.
            additional_content_types: Content types accepted besides ``application/json``
                (e.g. ``application/jwk-set+json`` for key sets).
        Returns:
            Dict[str, Any]: The parsed document.
        Raises:
            ValueError: If url is empty.
            MetadataTransportException: On network failure, non-2xx status, unexpected
                Content-Type or a body that is not a JSON object.
        """
        if not url:
            raise ValueError("url is not set")

        accepted_content_types: List[str] = [JSON_CONTENT_TYPE]
        accepted_content_types.extend(additional_content_types or [])

        client = self._environment.create_http_client()
        if client is None:
            raise MetadataTransportException(
                message=f"No HTTP client available in the runtime environment to fetch {url}",
                url=url,
            )

        async with client:
            try:
                logger.info(f"Fetching JSON document from {url}")
                response = await client.get(
                    url, headers={"Accept": ", ".join(accepted_content_types)}
                )
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                raise MetadataTransportException(
                    message=f"Failed to fetch {url} with status {e.response.status_code} : {e}",
                    url=url,
                    status_code=e.response.status_code,
                ) from e
            except ConnectError as e:
                raise MetadataTransportException(
                    message=f"Failed to connect to {url}: {e}", url=url
                ) from e
            except httpx.RequestError as e:
                raise MetadataTransportException(
                    message=f"Request to {url} failed [{type(e).__name__}]: {e}",
                    url=url,
                ) from e

        content_type: str | None = response.headers.get("content-type")
        if not content_type or not any(
            content_type.lower().startswith(accepted)
            for accepted in accepted_content_types
        ):
            raise MetadataTransportException(
                message=f"Invalid response Content-Type: {content_type}, from URL: {url}",
                url=url,
                status_code=response.status_code,
            )

        try:
            document: Any = response.json()
        except ValueError as e:  # JSONDecodeError, UnicodeDecodeError
            raise MetadataTransportException(
                message=f"Response from {url} is not valid JSON: {e}",
                url=url,
                status_code=response.status_code,
            ) from e

        if not isinstance(document, dict):
            raise MetadataTransportException(
                message=f"Response from {url} is not a JSON object, got {type(document).__name__}",
                url=url,
                status_code=response.status_code,
            )
        logger.debug(f"Received JSON document from {url} ({len(document)} keys)")
        return document
