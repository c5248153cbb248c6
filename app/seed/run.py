from __future__ import annotations

import logging

from app.connections.mongo import init_mongo, close_mongo
from app.seed import seed_privileged_users


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    init_mongo()
    try:
        seed_privileged_users()
    finally:
        close_mongo()


if __name__ == "__main__":
    main()
