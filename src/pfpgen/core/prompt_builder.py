"""Concept cleaning and prompt compilation for PFP generation.

The compiled prompt wraps the user's concept in fixed boilerplate that keeps
every generated picture recognisably the same character.  Two variants
exist, chosen by whether an identity reference image is attached:

Reference Structure::

    [Fixed: identity-anchor instructions]

    User Input Concept: "[concept]"

    [Fixed: style constraints]

Text-only Structure::

    [Fixed: character-consistency instructions]

    User Input Concept: "[concept]"

    [Fixed: style constraints]

Each section is separated by double newlines.  The output is a pure function
of the cleaned concept and the variant, so the same concept always yields the
same prompt.

Usage
-----
::

    concept = clean_concept(raw, max_length=200)
    prompt = build_prompt(concept, with_reference=True)
"""

from __future__ import annotations

from pfpgen.core.errors import InvalidInputError

# ---------------------------------------------------------------------------
# Fixed boilerplate sections.
# These define the recurring character and brand look; users only control the
# concept (clothing, props, theme).
# ---------------------------------------------------------------------------

_IDENTITY_ANCHOR = (
    "Use the attached image as the IDENTITY ANCHOR for the character. "
    "DO NOT change the face, skin tone, hair style, or bust-up crop.\n"
    "Create a new PFP where the character keeps all of their original features "
    "and the style, but their clothing, props, and theme are based on the "
    "user's input."
)

_CHARACTER_CONSISTENCY = (
    "Create a profile picture of the same recurring mascot character every time: "
    "a confident, square-jawed crypto degen with short swept-back hair and dark "
    "sunglasses. Keep the face, pose, and bust-up crop identical across pictures; "
    "only the clothing, props, and theme change, based on the user's input."
)

_STYLE_CONSTRAINTS = "\n".join(
    [
        "Style Constraints (maintain the original PFP style):",
        "- bust-up character portrait",
        "- clean circular PFP layout",
        "- centered character",
        "- neon degen crypto vibe",
        "- aqua & magenta lighting",
        "- Return ONLY a PNG image.",
    ]
)


def clean_concept(concept: object, *, max_length: int = 200) -> str:
    """Validate and normalise a raw concept value.

    Args:
        concept: The value received from the caller.  Anything other than a
            string is rejected.
        max_length: Maximum number of characters kept.  Longer concepts are
            cut silently.

    Returns:
        The trimmed, length-capped concept.

    Raises:
        InvalidInputError: If *concept* is missing, not a string, or empty
            after trimming.
    """
    if concept is None:
        raise InvalidInputError("concept is required")
    if not isinstance(concept, str):
        raise InvalidInputError("concept must be a string")

    cleaned = concept.strip()
    if not cleaned:
        raise InvalidInputError("concept must not be empty")

    # Re-strip after cutting so a cut in the middle of spacing leaves no tail.
    return cleaned[:max_length].rstrip()


def build_prompt(concept: str, *, with_reference: bool = False) -> str:
    """Compile the generation prompt for an already-cleaned concept.

    Args:
        concept: Output of :func:`clean_concept`.
        with_reference: ``True`` when an identity reference image is sent
            alongside the prompt.

    Returns:
        The full prompt with sections separated by double newlines.
    """
    preamble = _IDENTITY_ANCHOR if with_reference else _CHARACTER_CONSISTENCY
    parts = [
        preamble,
        f'User Input Concept: "{concept}"',
        _STYLE_CONSTRAINTS,
    ]
    return "\n\n".join(parts)
