from __future__ import annotations
import uvicorn

from .config import HOST, PORT, LOG_LEVEL


def main() -> None:
    uvicorn.run("tasktracker.main:app", host=HOST, port=PORT, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
