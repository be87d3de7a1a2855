"""API client for communicating with the gateway."""

import logging

import httpx
from pydantic import ValidationError

from bibletalk.config import settings
from bibletalk.generators.discussion import DiscussionOutline
from bibletalk.generators.moderation import ModerationResult

logger = logging.getLogger(__name__)


def _get_id_token(audience: str) -> str | None:
    """Get ID token for Cloud Run service-to-service authentication.

    Args:
        audience: The URL of the target service.

    Returns:
        ID token string, or None if not running on GCP or token fetch fails.
    """
    try:
        import google.auth.transport.requests
        import google.oauth2.id_token

        request = google.auth.transport.requests.Request()
        return google.oauth2.id_token.fetch_id_token(request, audience)
    except Exception as e:
        logger.debug(f"Could not get ID token (likely running locally): {e}")
        return None


class GatewayClient:
    """Client for the gateway routes.

    Every call degrades to a benign default instead of raising: moderation
    fails open and generation returns None.
    """

    def __init__(
        self,
        base_url: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the gateway client.

        Args:
            base_url: Base URL of the gateway. Defaults to settings.gateway_url.
            transport: Optional httpx transport, used in tests.
        """
        self.base_url = (base_url or settings.gateway_url).rstrip("/")
        self.timeout = settings.request_timeout
        self.transport = transport

    def _get_auth_headers(self) -> dict[str, str]:
        if self.transport is not None:
            return {}
        token = _get_id_token(self.base_url)
        if token:
            return {"Authorization": f"Bearer {token}"}
        return {}

    def _client(self, timeout: float | None = None) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            timeout=timeout or self.timeout,
            transport=self.transport,
            headers=self._get_auth_headers(),
        )

    def health_check(self) -> bool:
        """Check if the gateway is healthy.

        Returns:
            True if the gateway is healthy, False otherwise.
        """
        try:
            with self._client(timeout=5.0) as client:
                response = client.get("/health")
                return response.status_code == 200
        except httpx.RequestError:
            return False

    def moderate(self, hint: str) -> ModerationResult:
        """Screen a hint.

        Args:
            hint: Free-text user hint.

        Returns:
            ModerationResult; not flagged if the gateway could not be reached.
        """
        try:
            with self._client() as client:
                response = client.post("/api/moderation", json={"hint": hint})
                response.raise_for_status()
                return ModerationResult.model_validate(response.json())
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Moderation request failed: {e}")
            return ModerationResult(flagged=False)

    def generate_discussion(self, hint: str, model: str | None = None) -> DiscussionOutline | None:
        """Generate a discussion outline.

        Args:
            hint: Free-text user hint.
            model: Optional chat model override.

        Returns:
            DiscussionOutline, or None if generation failed.
        """
        try:
            with self._client() as client:
                response = client.post(
                    "/api/generate/discussion",
                    json={"hint": hint, "model": model},
                )
                response.raise_for_status()
                discussion = response.json().get("discussion")
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Discussion request failed: {e}")
            return None

        if not discussion:
            return None
        try:
            return DiscussionOutline.model_validate(discussion)
        except ValidationError as e:
            logger.error(f"Malformed discussion returned: {e}")
            return None

    def generate_flyer(self, topic: str, extra_prompt: str = "") -> str | None:
        """Generate a flyer image.

        Args:
            topic: Discussion topic.
            extra_prompt: Optional extra instructions.

        Returns:
            Base64 image, or None if generation failed.
        """
        try:
            with self._client() as client:
                response = client.post(
                    "/api/generate/flyer",
                    json={"topic": topic, "extra_prompt": extra_prompt},
                )
                response.raise_for_status()
                if not response.content:
                    return None
                return response.json().get("image") or None
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Flyer request failed: {e}")
            return None
