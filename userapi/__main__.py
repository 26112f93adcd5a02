#!/usr/bin/env python3
"""
Run the users API server.

  python -m userapi [--host HOST] [--port PORT] [--db PATH]

Defaults come from config.yaml / USERS_API_HOST / USERS_API_PORT / USERS_DB_PATH,
falling back to 127.0.0.1:8080 and users.db at the project root.
"""

import argparse
import logging

import uvicorn

from .api import create_app
from .db import get_server_address

logger = logging.getLogger("userapi")


def main(argv=None):
    host, port = get_server_address()
    ap = argparse.ArgumentParser(prog="userapi", description="users CRUD HTTP service")
    ap.add_argument("--host", default=host)
    ap.add_argument("--port", type=int, default=port)
    ap.add_argument("--db", default=None, help="SQLite file path")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logger.info("Server is running on %s:%d", args.host, args.port)
    uvicorn.run(create_app(args.db), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
