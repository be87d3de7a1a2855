"""UI module for the Streamlit web interface."""

from bibletalk.ui.api_client import GatewayClient
from bibletalk.ui.controller import DiscussionController
from bibletalk.ui.state import AppState
from bibletalk.ui.utils import (
    create_download_markdown,
    format_flagged_categories,
)

__all__ = [
    "AppState",
    "DiscussionController",
    "GatewayClient",
    "create_download_markdown",
    "format_flagged_categories",
]
