"""Gradle wrapper jar handling.

The ``gradlew`` scripts of the template tree run
``gradle/wrapper/gradle-wrapper.jar``.  A template tree may ship the jar as
``gradle-wrapper.jarX`` so packaging tools leave it alone; the generator
renames it on copy.  When no jar is bundled it is downloaded instead.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import httpx

from composables.errors import WrapperDownloadError

WRAPPER_JAR = "gradle/wrapper/gradle-wrapper.jar"
BUNDLED_JAR_SUFFIX = ".jarX"

_ZIP_MAGIC = b"PK\x03\x04"


def unbundled_name(name: str) -> str:
    """``gradle-wrapper.jarX`` -> ``gradle-wrapper.jar``; other names unchanged."""
    if name.endswith(BUNDLED_JAR_SUFFIX):
        return name[:-1]
    return name


async def fetch_wrapper_jar(url: str, destination: Path, timeout: float = 60.0) -> Path:
    """Download the wrapper jar from *url* to *destination*.

    Raises:
        WrapperDownloadError: On network failures, non-2xx responses and
            payloads that are not a jar.
    """
    try:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(timeout, connect=10.0),
            follow_redirects=True,
        ) as client:
            response = await client.get(url)
            response.raise_for_status()
    except httpx.TimeoutException as exc:
        raise WrapperDownloadError(f"Request to {url} timed out after {timeout}s.") from exc
    except httpx.HTTPStatusError as exc:
        raise WrapperDownloadError(f"{url} returned HTTP {exc.response.status_code}") from exc
    except httpx.HTTPError as exc:
        raise WrapperDownloadError(f"Cannot download {url}: {exc}") from exc

    data = response.content
    if not data.startswith(_ZIP_MAGIC):
        raise WrapperDownloadError(f"{url} did not return a jar archive")

    await asyncio.to_thread(destination.parent.mkdir, parents=True, exist_ok=True)
    await asyncio.to_thread(destination.write_bytes, data)
    return destination
