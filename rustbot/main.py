#!/usr/bin/env python3
"""
Main entry point for rustbot
"""

import asyncio
import logging
import sys

import aiohttp

from .bot.command_registry import CommandRegistry
from .config import BotConfig, get_configuration
from .constants import HTTP_USER_AGENT
from .errors.handling import log_error
from .errors.internal import NetworkError
from .irc.client import AsyncIRCClient
from .logging_config import LoggerConfigurator
from .modules import build_modules, init_modules


def build_client(config: BotConfig) -> AsyncIRCClient:
    return AsyncIRCClient(
        server=config.server,
        port=config.port,
        nickname=config.nickname,
        channels=config.channels,
        username=config.username,
        realname=config.realname,
        password=config.password,
        use_tls=config.use_tls,
    )


def build_registry(
    config: BotConfig, client: AsyncIRCClient, session: aiohttp.ClientSession
) -> CommandRegistry:
    """Create the command registry and let every module register its handlers."""
    commands = CommandRegistry(client, config.command_prefix)
    modules = build_modules(
        session,
        playground_url=config.playground_url,
        crates_io_url=config.crates_io_url,
    )
    init_modules(commands, modules)
    logging.debug(
        f"🧩 Handlers registered named={sorted(commands.named_handlers)} "
        f"fallback={len(commands.fallback_handlers)}"
    )
    return commands


async def main() -> None:
    """Load configuration, wire the registry to the IRC client and run it.

    Raises:
        SystemExit: If the configuration is invalid or the server stays unreachable.
    """
    try:
        logging.info("🚀 Starting rustbot")
        config = get_configuration()
        client = build_client(config)
        timeout = aiohttp.ClientTimeout(total=config.http_timeout)
        async with aiohttp.ClientSession(
            timeout=timeout, headers={"User-Agent": HTTP_USER_AGENT}
        ) as session:
            commands = build_registry(config, client, session)
            client.set_message_handler(commands.handle_message)
            await client.run()
    except asyncio.CancelledError:
        raise
    except KeyboardInterrupt:
        pass
    except NetworkError as e:
        log_error("IRC server unreachable", e)
        sys.exit(1)
    finally:
        logging.info("✅ Application shutdown complete")


def health_check() -> int:
    """Validate the configuration without connecting.

    Returns:
        Process exit code, 0 when the configuration loads.
    """
    logging.info("🏥 Health check mode")
    config = get_configuration()
    logging.info(
        f"✅ Health check passed - {config.nickname}@{config.server}, "
        f"{len(config.channels)} channel(s) configured"
    )
    return 0


def run() -> None:
    """Synchronous entry point for the application."""
    LoggerConfigurator().configure()
    if len(sys.argv) > 1 and sys.argv[1] == "--health-check":
        sys.exit(health_check())
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        sys.exit(0)
    except asyncio.CancelledError:
        sys.exit(0)


if __name__ == "__main__":
    run()
