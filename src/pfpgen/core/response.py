"""Provider response normalization.

Gemini responses arrive in more than one shape depending on how they were
obtained:

- ``google-genai`` SDK objects use attribute access with snake_case names
  (``part.inline_data.mime_type``) and hold the payload as decoded ``bytes``.
- Raw REST JSON uses camelCase keys (``inlineData``/``mimeType``) and holds
  the payload as base64 text.
- Some proxies mix the two.

:func:`extract_image` is the only place that knows about these variants.  It
maps any of them onto a single :class:`GeneratedImage` or raises
:class:`~pfpgen.core.errors.NoImageReturnedError`.
"""

from __future__ import annotations

import base64
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pfpgen.core.errors import NoImageReturnedError

DEFAULT_MIME_TYPE = "image/png"

# Longest snippet of model text echoed back when no image was produced.
_TEXT_SNIPPET_LENGTH = 200


@dataclass(frozen=True)
class GeneratedImage:
    """A successfully generated image.

    Attributes:
        data: Base64-encoded image bytes.
        mime_type: Declared MIME type of the image.
    """

    data: str
    mime_type: str = DEFAULT_MIME_TYPE

    @property
    def data_url(self) -> str:
        """The image as a ``data:<mime>;base64,<data>`` URL."""
        return f"data:{self.mime_type};base64,{self.data}"


def _field(obj: Any, *names: str) -> Any:
    """Return the first non-``None`` value among *names* on *obj*.

    Works for both mappings and attribute-style objects.
    """
    if obj is None:
        return None
    for name in names:
        if isinstance(obj, Mapping):
            value = obj.get(name)
        else:
            value = getattr(obj, name, None)
        if value is not None:
            return value
    return None


def _first_candidate_parts(response: Any) -> list:
    candidates = _field(response, "candidates")
    if not candidates:
        raise NoImageReturnedError("Provider response contained no candidates")

    content = _field(candidates[0], "content")
    parts = _field(content, "parts")
    if not parts:
        raise NoImageReturnedError("Provider response candidate contained no content parts")
    return list(parts)


def extract_image(response: Any) -> GeneratedImage:
    """Pick the first inline image out of a provider response.

    Only the first candidate is inspected.  Its parts are scanned in order and
    the first one carrying inline data wins; text parts are skipped.

    Args:
        response: SDK response object or JSON-like mapping.

    Returns:
        The normalised :class:`GeneratedImage`.

    Raises:
        NoImageReturnedError: If there is no candidate, no inline part, or the
            inline payload is empty or of an unexpected type.
    """
    parts = _first_candidate_parts(response)

    texts: list[str] = []
    for part in parts:
        inline = _field(part, "inline_data", "inlineData")
        if inline is None:
            text = _field(part, "text")
            if isinstance(text, str) and text.strip():
                texts.append(text.strip())
            continue

        payload = _field(inline, "data")
        mime_type = _field(inline, "mime_type", "mimeType") or DEFAULT_MIME_TYPE

        # The SDK hands back decoded bytes; REST JSON hands back base64 text.
        if isinstance(payload, (bytes, bytearray)):
            payload = base64.b64encode(payload).decode("ascii")
        if not isinstance(payload, str) or not payload:
            raise NoImageReturnedError("Provider returned an inline part without image data")

        return GeneratedImage(data=payload, mime_type=mime_type)

    if texts:
        snippet = " ".join(texts)[:_TEXT_SNIPPET_LENGTH]
        raise NoImageReturnedError(f"Provider returned text instead of an image: {snippet}")
    raise NoImageReturnedError("Provider response contained no inline image data")
