"""Readiness probe for a running karen service.

The service has no route at its root, so a 404 from `GET /` means the app is up
and routing requests. Anything else (another status or a connection error) means
"not yet ready" and is retried at a fixed interval.

Usage:
    HOST=localhost:8000 karen-wait
"""

import os
import sys
import time
from typing import Optional
import requests
from dotenv import load_dotenv

load_dotenv()

DEFAULT_RETRIES = int(os.getenv("KAREN_WAIT_RETRIES", "20"))
DEFAULT_INTERVAL_SEC = float(os.getenv("KAREN_WAIT_INTERVAL_SEC", "1"))
REQUEST_TIMEOUT_SEC = 5


class ServiceNotReadyError(Exception):
    """Raised when the service did not become ready within the retry budget."""


def is_ready(endpoint: str) -> bool:
    """Probe the service root once."""
    try:
        response = requests.get(endpoint, timeout=REQUEST_TIMEOUT_SEC)
    except requests.RequestException as e:
        print(f"Failed: {type(e).__name__}")
        return False
    if response.status_code != 404:
        print(f"Failed: status {response.status_code}")
        return False
    return True


def wait_for_service(
    endpoint: str,
    retries: int = DEFAULT_RETRIES,
    interval: float = DEFAULT_INTERVAL_SEC,
) -> None:
    """Poll `endpoint` until it answers 404.

    Args:
        endpoint: Service root URL
        retries: Attempts allowed after the first one
        interval: Seconds to sleep between attempts

    Raises:
        ServiceNotReadyError: If every attempt failed
    """
    remaining = retries
    while not is_ready(endpoint):
        if remaining <= 0:
            raise ServiceNotReadyError("Failed too many times.")
        print(f"Retrying ({remaining} more attempts)...")
        remaining -= 1
        time.sleep(interval)


def _endpoint_from_host(host: str) -> str:
    if host.startswith("http://") or host.startswith("https://"):
        return host
    return f"http://{host}"


def main(argv: Optional[list] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    host = args[0] if args else os.getenv("HOST")
    if not host:
        print("Set HOST (or pass host[:port]) to the karen service address.")
        return 2

    print("Waiting for karen to start up...")
    try:
        wait_for_service(_endpoint_from_host(host))
    except ServiceNotReadyError as e:
        print(str(e))
        return 1
    print("Success!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
