"""Error taxonomy for PFP generation.

Every failure the service can report is one of the classes below.  Each
carries a short machine-readable ``code``, the HTTP ``status_code`` it is
surfaced with, and a human-readable ``details`` string.  The API layer turns
any :class:`PfpError` into the failure body::

    {"ok": false, "error": "<code>", "details": "<message>"}

========================  =====================  ======
Class                     code                   HTTP
========================  =====================  ======
InvalidInputError         ``invalid_input``      400
ProviderRejectedError     ``provider_rejected``  400/500
RateLimitedError          ``rate_limited``       429
NoImageReturnedError      ``no_image_returned``  500
GenerationFailedError     ``generation_failed``  500
========================  =====================  ======
"""

from __future__ import annotations

import re

# Message fragments that identify a quota or rate-limit rejection when the
# provider does not hand us a structured status code.
_RATE_LIMIT_MARKERS = (
    "resource_exhausted",
    "resource exhausted",
    "quota",
    "rate limit",
    "rate-limit",
    "too many requests",
)

# A bare status code inside a message, not digits embedded in a longer number.
_RATE_LIMIT_CODE = re.compile(r"\b429\b")


class PfpError(Exception):
    """Base class for all generation failures surfaced to callers."""

    code: str = "generation_failed"
    status_code: int = 500

    def __init__(self, details: str, *, status_code: int | None = None) -> None:
        super().__init__(details)
        self.details = details
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        """Return the JSON failure body for this error."""
        return {"ok": False, "error": self.code, "details": self.details}


class InvalidInputError(PfpError):
    """The concept is missing, empty after trimming, or not a string."""

    code = "invalid_input"
    status_code = 400


class ProviderRejectedError(PfpError):
    """The provider answered with a non-2xx status other than a rate limit."""

    code = "provider_rejected"
    status_code = 500


class RateLimitedError(PfpError):
    """The provider signalled quota or rate exhaustion."""

    code = "rate_limited"
    status_code = 429

    def __init__(self, details: str | None = None) -> None:
        super().__init__(
            details
            or "The image provider is rate limiting requests. Please try again in a minute."
        )


class NoImageReturnedError(PfpError):
    """The provider answered successfully but without an inline image."""

    code = "no_image_returned"
    status_code = 500


class GenerationFailedError(PfpError):
    """Anything else: network failure, timeout, malformed response, misconfiguration."""

    code = "generation_failed"
    status_code = 500


def is_rate_limit_error(exc: BaseException, *, scan_message: bool = True) -> bool:
    """Return ``True`` if *exc* looks like a provider quota/rate-limit signal.

    Checks a numeric ``code`` or ``status_code`` attribute for 429 and a
    ``RESOURCE_EXHAUSTED`` status first.  With *scan_message* the exception
    text is searched as a fallback; pass ``False`` for errors that already
    carry a structured status, since other rejections (e.g. a 403 asking for
    a quota project) can mention quotas too.
    """
    for attr in ("code", "status_code"):
        if getattr(exc, attr, None) == 429:
            return True
    status = getattr(exc, "status", None)
    if isinstance(status, str) and status.upper() == "RESOURCE_EXHAUSTED":
        return True
    if not scan_message:
        return False
    message = str(exc).lower()
    if _RATE_LIMIT_CODE.search(message):
        return True
    return any(marker in message for marker in _RATE_LIMIT_MARKERS)
