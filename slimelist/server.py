# SPDX-License-Identifier: MIT
"""
SlimeList server entrypoint.

Wires FastMCP with the tool modules under slimelist/tools/, all bound to one
Session (catalog client + list store) for the configured user.
"""

from __future__ import annotations

import logging
from typing import Optional

from mcp.server.fastmcp import FastMCP

from .config import load_config, configure_logging
from .core.session import Session
from .store.sqlite import SqliteListStore
from .tools import catalog, watchlist, meta

logger = logging.getLogger(__name__)


def open_session(cfg: dict) -> Session:
    store = SqliteListStore(cfg["database"])
    return Session(cfg["user_id"], store, cfg, owns_store=True).open()


def create_app(session: Optional[Session] = None) -> FastMCP:
    if session is None:
        cfg = load_config()
        configure_logging(cfg["logging_level"])
        session = open_session(cfg)

    mcp = FastMCP("slimelist")

    # Register tools from each module
    catalog.register_tools(mcp, session)
    watchlist.register_tools(mcp, session)
    meta.register_tools(mcp, session)

    logger.info("slimelist ready for user=%s", session.user_id)
    return mcp


def main() -> None:
    cfg = load_config()
    configure_logging(cfg["logging_level"])
    with open_session(cfg) as session:
        create_app(session).run()


if __name__ == "__main__":
    main()
