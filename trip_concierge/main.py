"""
Main entry point for the Trip Concierge application.

This module provides an interactive command-line chat with the trip planning
conversation, plus an export of the conversation graph as a Mermaid diagram.
"""

import argparse
import asyncio
import sys
import traceback

from trip_concierge.config import TripConciergeConfig, initialize_config
from trip_concierge.orchestration.engine import CONTINUE_SENTINEL
from trip_concierge.orchestration.nodes import NodeServices
from trip_concierge.services.session_service import SessionService
from trip_concierge.utils.helpers import generate_session_id
from trip_concierge.utils.logging import get_logger, setup_logging
from trip_concierge.utils.rate_limiting import initialize_rate_limiting

logger = get_logger(__name__)

EXIT_COMMANDS = ("exit", "quit", "q", "bye")


def setup_argparse() -> argparse.ArgumentParser:
    """
    Set up the argument parser for the CLI.

    Returns:
        Configured argument parser
    """
    parser = argparse.ArgumentParser(
        description="Conversational trip planner powered by Google Gemini and Tavily"
    )

    system_group = parser.add_argument_group("System Configuration")
    system_group.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
        help="Set the logging level",
    )
    system_group.add_argument(
        "--log-file",
        type=str,
        help="Path to write log file (optional)",
    )
    system_group.add_argument(
        "--config",
        type=str,
        help="Path to custom configuration file",
    )

    session_group = parser.add_argument_group("Session")
    session_group.add_argument(
        "--session",
        type=str,
        help="Session id to use (generated when omitted)",
    )
    session_group.add_argument(
        "--export-graph",
        action="store_true",
        help="Print the conversation graph as a Mermaid diagram and exit",
    )

    return parser


def display_help() -> None:
    print("\nAvailable commands:")
    print("  help                - Display this help message")
    print("  start over, reset   - Start planning a new trip")
    print("  exit, quit, q, bye  - Exit the application")


async def send(service: SessionService, session_id: str, text: str) -> str:
    """
    Send a message and settle any search it starts.

    A reply announcing a search is printed right away, then the search result
    is collected with the continue sentinel, the way chat clients do.
    """
    reply = await service.process_input(session_id, text)
    while reply.is_searching:
        print(f"\nConcierge: {reply.reply_text}")
        reply = await service.process_input(session_id, CONTINUE_SENTINEL)
    return reply.reply_text


async def run_interactive_mode(service: SessionService, session_id: str) -> None:
    """
    Chat with the trip planner until the user exits.

    Args:
        service: Session service holding the conversation
        session_id: Session used for the whole chat
    """
    logger.info(f"Starting interactive session {session_id}")

    print("\n=== Trip Concierge ===")
    print("Type 'exit' or 'quit' to end the session.")
    print("Type 'help' for available commands.")
    print(f"\nConcierge: {service.greeting()}")

    while True:
        user_input = input("\nYou: ").strip()

        if user_input.lower() in EXIT_COMMANDS:
            print("\nThank you for using Trip Concierge. Safe travels!")
            break

        if user_input.lower() == "help":
            display_help()
            continue

        try:
            reply = await send(service, session_id, user_input)
            print(f"\nConcierge: {reply}")
        except Exception as e:
            logger.error(
                f"Error in interactive session: {e!s}\n{traceback.format_exc()}"
            )
            print(f"\nConcierge: I'm sorry, I encountered an error: {e!s}")


def _initialize_system_configuration(args: argparse.Namespace) -> TripConciergeConfig:
    """Load configuration and rate limits for the gateways."""
    config = initialize_config(custom_config_path=args.config, validate=True)
    initialize_rate_limiting()
    return config


async def run(args: argparse.Namespace) -> int:
    config = _initialize_system_configuration(args)
    service = SessionService(NodeServices.from_config(config))

    if args.export_graph:
        print(service.graph_mermaid())
        return 0

    await run_interactive_mode(service, args.session or generate_session_id())
    return 0


def main() -> int:
    """
    Main entry point function.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    args = setup_argparse().parse_args()
    setup_logging(log_level=args.log_level, log_file=args.log_file)
    logger.info("Starting Trip Concierge")

    try:
        return asyncio.run(run(args))
    except TripConciergeConfig.ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        print(f"\nConfiguration Error: {e}")
        print("Please check your environment variables and configuration settings.")
        return 1
    except (KeyboardInterrupt, EOFError):
        logger.info("Session interrupted by user")
        print("\nSession interrupted. Goodbye!")
        return 0
    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        print(f"\nError: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
