"""OpenAI API key lookup in Google Cloud Secret Manager.

Each environment keeps its key in its own secret, ``bibletalk-openai-api-key-<env>``.
"""

import logging

from google.api_core import exceptions as gcp_exceptions
from google.auth.exceptions import DefaultCredentialsError
from google.cloud import secretmanager

logger = logging.getLogger(__name__)

OPENAI_KEY_SECRET = "bibletalk-openai-api-key-{environment}"


def openai_key_secret_path(project_id: str, environment: str) -> str:
    """Full resource name of the latest OpenAI key version for an environment."""
    return secretmanager.SecretManagerServiceClient.secret_version_path(
        project_id, OPENAI_KEY_SECRET.format(environment=environment), "latest"
    )


def fetch_openai_api_key(project_id: str, environment: str) -> str | None:
    """Read the OpenAI API key for an environment.

    Returns:
        The key, or None if the secret cannot be read from this machine.
    """
    name = openai_key_secret_path(project_id, environment)
    try:
        client = secretmanager.SecretManagerServiceClient()
        response = client.access_secret_version(name=name)
    except DefaultCredentialsError:
        logger.debug("No Google credentials, not reading the OpenAI key from Secret Manager")
        return None
    except gcp_exceptions.GoogleAPICallError as e:
        logger.warning(f"Could not read {name}: {e}")
        return None

    return response.payload.data.decode("utf-8").strip()
