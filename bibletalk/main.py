"""Command line entry point: run the gateway or a fine-tuning job."""

import argparse
import asyncio
import logging
import os
import sys

from bibletalk.config import settings
from bibletalk.tuning import FineTuneWorkflow, TuningState

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(description="BibleTalk GPT gateway and tooling")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP gateway")
    serve.add_argument("--host", type=str, default="0.0.0.0", help="Bind address")
    serve.add_argument(
        "--port",
        type=int,
        default=int(os.environ.get("PORT", "8000")),
        help="Bind port (uses PORT if not specified)",
    )

    tune = subparsers.add_parser("fine-tune", help="Fine tune the discussion model")
    tune.add_argument(
        "--training-file",
        type=str,
        default=settings.training_file,
        help="JSONL training data (uses TRAINING_FILE if not specified)",
    )
    tune.add_argument(
        "--base-model",
        type=str,
        default=settings.fine_tune_base_model,
        help="Model to fine tune",
    )
    return parser


def run_fine_tune(training_file: str, base_model: str) -> str | None:
    """Run a fine-tuning job to completion, logging its progress."""
    state = TuningState()
    workflow = FineTuneWorkflow(
        state=state,
        training_file=training_file,
        base_model=base_model,
    )
    return asyncio.run(workflow.run())


def main():
    """Main function for the CLI."""
    args = build_parser().parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.command == "serve":
        import uvicorn

        uvicorn.run("bibletalk.api.main:app", host=args.host, port=args.port)
        return

    try:
        model_id = run_fine_tune(args.training_file, args.base_model)
    except KeyboardInterrupt:
        logger.info("Fine tuning interrupted; the job keeps running server-side")
        sys.exit(130)

    if model_id is None:
        logger.error("Fine tuning failed")
        sys.exit(1)

    logger.info(f"Fine tuned model: {model_id}")
    logger.info(f"Set DISCUSSION_MODEL={model_id} to use it for discussions")


if __name__ == "__main__":
    main()
