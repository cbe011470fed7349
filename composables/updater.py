"""Self-update: fetch the published install script and run it with bash."""

from __future__ import annotations

import httpx

from composables.errors import UpdateError
from composables.utils import run_command


async def download_script(url: str, timeout: float = 30.0) -> str:
    """Return the text of the install script at *url*.

    Raises:
        UpdateError: On connection failures, timeouts and non-2xx responses.
    """
    try:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(timeout, connect=10.0),
            follow_redirects=True,
        ) as client:
            response = await client.get(url)
            response.raise_for_status()
    except httpx.TimeoutException as exc:
        raise UpdateError(f"Request to {url} timed out after {timeout}s.") from exc
    except httpx.HTTPStatusError as exc:
        raise UpdateError(f"{url} returned HTTP {exc.response.status_code}") from exc
    except httpx.HTTPError as exc:
        raise UpdateError(f"Cannot download {url}: {exc}") from exc
    return response.text


async def run_script(script: str) -> int:
    """Pipe *script* into ``bash -s`` with the terminal attached; return its exit code."""
    returncode, _stdout, _stderr = await run_command(
        ["bash", "-s"], capture=False, input_text=script
    )
    return returncode
