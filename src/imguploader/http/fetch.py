"""Download source images referenced by a document."""

from __future__ import annotations

from dataclasses import dataclass

from imguploader.errors import FetchError, NetworkError
from imguploader.image.detect import filename_from_url, guess_mime_type

from .transport import AsyncHttpTransport


@dataclass(frozen=True)
class FetchedImage:
    """Raw image bytes plus the metadata the uploader needs."""

    data: bytes
    filename: str
    mime_type: str


async def fetch_image(transport: AsyncHttpTransport, url: str) -> FetchedImage:
    """GET *url* and return its bytes.

    The ``Content-Type`` of the response wins; without one the MIME type is
    inferred from the URL's extension.

    Raises
    ------
    FetchError
        On any status other than ``200`` (message ``"HTTP <status>"``) or
        when the request fails at the transport level.
    """
    try:
        response = await transport.get(url, headers={"Accept": "image/*"})
    except NetworkError as exc:
        raise FetchError(
            message=exc.message,
            context={"url": url},
            cause=exc,
        ) from exc

    if response.status_code != 200:
        raise FetchError(
            message=f"HTTP {response.status_code}",
            context={"url": url, "status_code": response.status_code},
        )

    mime_type = response.headers.get("content-type") or guess_mime_type(url)
    return FetchedImage(
        data=response.content,
        filename=filename_from_url(url),
        mime_type=mime_type,
    )
