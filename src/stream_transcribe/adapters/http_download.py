import logging
from pathlib import Path, PurePosixPath
from urllib.parse import unquote, urlparse

import httpx

logger = logging.getLogger(__name__)


class DownloadError(Exception):
    pass


def file_name_from_url(url: str) -> str:
    segment = unquote(urlparse(url).path.rsplit("/", 1)[-1])
    name = PurePosixPath(segment).name
    if not name or name in (".", "..") or name != segment or "\\" in name:
        raise DownloadError(f"URL has no usable file name segment: {url}")
    return name


async def download_file(
    url: str,
    dest_dir: str | Path = ".",
    client: httpx.AsyncClient | None = None,
) -> Path:
    destination = Path(dest_dir) / file_name_from_url(url)
    logger.info("Downloading %s to %s", url, destination)

    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=httpx.Timeout(120.0), follow_redirects=True)

    created = False
    try:
        async with client.stream("GET", url) as response:
            response.raise_for_status()
            with open(destination, "wb") as output:
                created = True
                async for chunk in response.aiter_bytes():
                    output.write(chunk)
    except httpx.HTTPStatusError as exc:
        raise DownloadError(f"Download of {url} failed with HTTP {exc.response.status_code}") from exc
    except httpx.HTTPError as exc:
        if created:
            destination.unlink(missing_ok=True)
        raise DownloadError(f"Download of {url} failed: {exc}") from exc
    except OSError as exc:
        if created:
            destination.unlink(missing_ok=True)
        raise DownloadError(f"Cannot write {destination}: {exc}") from exc
    finally:
        if owns_client:
            await client.aclose()

    return destination
