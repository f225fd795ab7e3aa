# -*- coding: utf-8 -*-

# JumpinAI Studio Gate
# Copyright (C) 2025 JumpinAI
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program. If not, see <https://www.gnu.org/licenses/>.

"""
JumpinAI Studio Gate - entry point.

Validates Studio form submissions and bot-checks them with Cloudflare
Turnstile before they are released to Jump generation.

Usage:
    # Using default settings (host: 0.0.0.0, port: 8000)
    python main.py

    # With CLI arguments (highest priority)
    python main.py --port 9000
    python main.py --host 127.0.0.1 --port 9000

    # With environment variables (medium priority)
    SERVER_PORT=9000 python main.py

    # Using uvicorn directly (uvicorn handles its own CLI args)
    uvicorn main:app --host 0.0.0.0 --port 8000

Priority: CLI args > Environment variables > Default values
"""

import argparse
import logging
import sys
from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from jumpgate.config import (
    APP_DESCRIPTION,
    APP_TITLE,
    APP_VERSION,
    CORS_ALLOW_HEADERS,
    CORS_ALLOW_ORIGINS,
    DEFAULT_SERVER_HOST,
    DEFAULT_SERVER_PORT,
    LOG_LEVEL,
    REQUIRE_TURNSTILE_TOKEN,
    SERVER_HOST,
    SERVER_PORT,
    TURNSTILE_SECRET_KEY,
    TURNSTILE_TIMEOUT,
    TURNSTILE_VERIFY_URL,
)
from jumpgate.gate import StudioGate
from jumpgate.routes import router
from jumpgate.turnstile import TurnstileVerifier


# --- Loguru Configuration ---
logger.remove()
logger.add(
    sys.stderr,
    level=LOG_LEVEL,
    colorize=True,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
)


class InterceptHandler(logging.Handler):
    """
    Intercepts logs from standard logging and redirects them to loguru.

    Keeps uvicorn access/error logs in the same format as the application.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find the caller frame outside of the logging module
        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging_intercept() -> None:
    """Route uvicorn loggers through loguru."""
    intercept_handler = InterceptHandler()
    for logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging_logger = logging.getLogger(logger_name)
        logging_logger.handlers = [intercept_handler]
        logging_logger.propagate = False


setup_logging_intercept()


def validate_configuration() -> None:
    """
    Validates that required settings are present.

    Exits with status 1 when the Turnstile secret is missing, since every
    token would then be rejected by siteverify.
    """
    errors = []

    if not TURNSTILE_SECRET_KEY:
        errors.append(
            "TURNSTILE_SECRET_KEY is not set.\n"
            "    Add it to your .env file or environment:\n"
            "      TURNSTILE_SECRET_KEY=0x4AAAAAAA..."
        )

    if errors:
        logger.error("")
        logger.error("=" * 60)
        logger.error("  CONFIGURATION ERROR")
        logger.error("=" * 60)
        for error in errors:
            for line in error.split("\n"):
                logger.error(f"  {line}")
        logger.error("=" * 60)
        sys.exit(1)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the shared HTTP client and the gate; close the client on shutdown."""
    logger.info("Starting application... Creating Studio gate.")
    if not TURNSTILE_SECRET_KEY:
        logger.warning(
            "[Config] TURNSTILE_SECRET_KEY is not set. "
            "Every submission carrying a Turnstile token will be rejected."
        )

    app.state.http_client = httpx.AsyncClient(timeout=TURNSTILE_TIMEOUT)
    verifier = TurnstileVerifier(
        secret_key=TURNSTILE_SECRET_KEY,
        verify_url=TURNSTILE_VERIFY_URL,
        timeout=TURNSTILE_TIMEOUT,
        client=app.state.http_client,
    )
    app.state.studio_gate = StudioGate(
        verifier, require_token=REQUIRE_TURNSTILE_TOKEN
    )
    logger.info(
        "Studio gate ready (require_token={}, timeout={}s)",
        REQUIRE_TURNSTILE_TOKEN,
        TURNSTILE_TIMEOUT,
    )

    yield

    logger.info("Shutting down application...")
    await app.state.http_client.aclose()


def create_app() -> FastAPI:
    application = FastAPI(
        title=APP_TITLE,
        description=APP_DESCRIPTION,
        version=APP_VERSION,
        lifespan=lifespan,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ALLOW_ORIGINS,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=CORS_ALLOW_HEADERS,
    )
    application.include_router(router)
    return application


app = create_app()


# --- CLI ---
def parse_cli_args() -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace. host/port are None when not given.
    """
    parser = argparse.ArgumentParser(
        description=f"{APP_TITLE} - {APP_DESCRIPTION}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                         # Use defaults (0.0.0.0:8000)
  python main.py --port 9000             # Custom port
  python main.py -H 127.0.0.1 -p 9000    # Local only, custom port

Environment variables:
  SERVER_HOST, SERVER_PORT, TURNSTILE_SECRET_KEY, LOG_LEVEL
        """,
    )
    parser.add_argument(
        "-H",
        "--host",
        type=str,
        default=None,
        metavar="HOST",
        help=f"Server host address (default: {DEFAULT_SERVER_HOST})",
    )
    parser.add_argument(
        "-p",
        "--port",
        type=int,
        default=None,
        metavar="PORT",
        help=f"Server port (default: {DEFAULT_SERVER_PORT})",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {APP_VERSION}",
    )
    return parser.parse_args()


def resolve_server_config(args: argparse.Namespace) -> tuple:
    """
    Resolve host and port: CLI args > environment > defaults.

    Each value is resolved independently.

    Returns:
        (host, port)
    """
    if args.host is not None:
        host = args.host
    elif SERVER_HOST != DEFAULT_SERVER_HOST:
        host = SERVER_HOST
    else:
        host = DEFAULT_SERVER_HOST

    if args.port is not None:
        port = args.port
    elif SERVER_PORT != DEFAULT_SERVER_PORT:
        port = SERVER_PORT
    else:
        port = DEFAULT_SERVER_PORT

    return host, port


def print_startup_banner(host: str, port: int) -> None:
    """Print the listening URL and useful endpoints."""
    display_host = "localhost" if host == "0.0.0.0" else host
    url = f"http://{display_host}:{port}"

    print()
    print(f"  {APP_TITLE} v{APP_VERSION}")
    print()
    print(f"  Server running at:  {url}")
    print(f"  API docs:           {url}/docs")
    print(f"  Health check:       {url}/health")
    print()


if __name__ == "__main__":
    args = parse_cli_args()
    validate_configuration()
    final_host, final_port = resolve_server_config(args)
    print_startup_banner(final_host, final_port)
    logger.info(f"Starting Uvicorn server on {final_host}:{final_port}...")
    uvicorn.run(
        "main:app",
        host=final_host,
        port=final_port,
        log_config=None,
    )
