"""Server entrypoint: starts uvicorn with host and port from env."""
import os

import uvicorn

from ethmonitor.main import app


def main() -> None:
    host = os.environ.get("ETHMONITOR_HOST", "127.0.0.1")
    port = int(os.environ.get("ETHMONITOR_PORT", "8001"))
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
