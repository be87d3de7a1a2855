"""Page actions: moderation -> discussion -> flyer, and fine tuning."""

import asyncio
import logging
import threading
from collections.abc import Callable

from bibletalk.tuning.workflow import FineTuneWorkflow, TuningState
from bibletalk.ui.api_client import GatewayClient
from bibletalk.ui.state import AppState
from bibletalk.ui.utils import format_flagged_categories

logger = logging.getLogger(__name__)

POLICY_MESSAGE = "Your hint doesn't align with our policy, "

WorkflowFactory = Callable[[TuningState, Callable[[str], None]], FineTuneWorkflow]


def _default_workflow(state: TuningState, on_model_ready: Callable[[str], None]) -> FineTuneWorkflow:
    # Each run builds and closes its own client on the thread's event loop
    return FineTuneWorkflow(state=state, on_model_ready=on_model_ready)


class DiscussionController:
    """Drives the page state through the gateway."""

    def __init__(
        self,
        api_client: GatewayClient,
        state: AppState,
        workflow_factory: WorkflowFactory = _default_workflow,
    ):
        self.api_client = api_client
        self.state = state
        self.workflow_factory = workflow_factory
        self.workflow: FineTuneWorkflow | None = None
        self._thread: threading.Thread | None = None

    def generate_discussion(self) -> bool:
        """Moderate the current hint and, if clear, generate a new outline.

        Returns:
            True if a new outline replaced the current one.
        """
        state = self.state
        if not state.hint or not state.active_model or state.is_generating:
            return False

        state.is_generating = True
        state.error_message = None
        try:
            moderation = self.api_client.moderate(state.hint)
            if moderation.flagged:
                state.error_message = POLICY_MESSAGE + format_flagged_categories(
                    moderation.categories
                )
                return False

            discussion = self.api_client.generate_discussion(state.hint, model=state.active_model)
            if discussion is None:
                return False

            state.discussion = discussion
            state.hint = ""
        finally:
            state.is_generating = False

        self.refresh_flyer()
        return True

    def refresh_flyer(self) -> bool:
        """Regenerate the flyer for the current outline.

        Returns:
            True if a new flyer replaced the current one.
        """
        state = self.state
        if state.discussion is None:
            return False

        state.is_flyer_loading = True
        try:
            image = self.api_client.generate_flyer(
                state.discussion.bible_talk_topic,
                state.extra_flyer_prompt,
            )
        finally:
            state.is_flyer_loading = False

        if not image:
            return False
        state.flyer_image = image
        return True

    def update_flyer_prompt(self, extra_prompt: str) -> bool:
        """Change the extra flyer instructions and regenerate if they differ."""
        if extra_prompt == self.state.extra_flyer_prompt:
            return False
        self.state.extra_flyer_prompt = extra_prompt
        return self.refresh_flyer()

    def _set_active_model(self, model_id: str) -> None:
        logger.info(f"Switching discussion model to {model_id}")
        self.state.active_model = model_id

    def start_fine_tuning(self) -> bool:
        """Start a fine-tuning run in a background thread.

        Returns:
            False if a run is already in progress.
        """
        if self.state.tuning.is_active or (self._thread and self._thread.is_alive()):
            return False

        self.workflow = self.workflow_factory(self.state.tuning, self._set_active_model)
        workflow = self.workflow

        def run() -> None:
            try:
                asyncio.run(workflow.run())
            except asyncio.CancelledError:
                pass

        self._thread = threading.Thread(target=run, name="fine-tune", daemon=True)
        self._thread.start()
        return True

    def cancel_fine_tuning(self) -> None:
        """Cancel the running fine-tuning workflow, if any."""
        if self.workflow is not None:
            self.workflow.cancel()

    def wait_for_fine_tuning(self, timeout: float | None = None) -> None:
        """Block until the background fine-tuning thread exits."""
        if self._thread is not None:
            self._thread.join(timeout)
