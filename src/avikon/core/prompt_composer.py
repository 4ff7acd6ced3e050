"""Enhanced prompt composition for Gemini image generation.

The user's prompt is extended with short, fixed guidance sentences so the
model receives the style, framing and quality expectations as plain text.
Composition is deterministic and has no side effects.

Structure (each clause only when applicable)::

    [Reference image instruction] <prompt> Style: <style>. <aspect clause>
    <quality clause> Avoid: <negative prompt>.

Usage
-----
::

    compose_prompt(GenerationRequest(prompt="A fox in a scarf", style="Vintage"))
    # 'A fox in a scarf Style: Vintage. Square image. High-resolution, ...'
"""

from __future__ import annotations

from avikon.core.models import GenerationRequest

# Exact lookup.  The request model only admits these four ratios, so a miss is
# a programming error and surfaces as KeyError.
ASPECT_RATIO_CLAUSES: dict[str, str] = {
    "1:1": "Square image.",
    "16:9": "Wide landscape format.",
    "9:16": "Tall portrait format.",
    "4:3": "Standard photo format.",
}

HIGH_QUALITY_CLAUSE = "High-resolution, professional quality, ultra-detailed."
GOOD_QUALITY_CLAUSE = "Good quality, detailed."

REFERENCE_IMAGE_INSTRUCTION = "Use this reference image as inspiration and style guide."


def quality_clause(quality: int) -> str:
    """Return the quality sentence for a 1-10 quality level ("" below 6)."""
    if quality >= 8:
        return HIGH_QUALITY_CLAUSE
    if quality >= 6:
        return GOOD_QUALITY_CLAUSE
    return ""


def compose_prompt(request: GenerationRequest) -> str:
    """Build the enhanced prompt sent to the model.

    Args:
        request: The generation request.  ``prompt`` is used as given; the
            route trims it before calling this function.

    Returns:
        The composed prompt.  It always starts with ``request.prompt`` unless
        a reference image is attached, in which case the reference
        instruction comes first.

    Raises:
        KeyError: If ``request.aspect_ratio`` is not one of the four ratios.
    """
    enhanced = request.prompt

    if request.style:
        enhanced += f" Style: {request.style}."

    enhanced += f" {ASPECT_RATIO_CLAUSES[request.aspect_ratio]}"

    clause = quality_clause(request.quality)
    if clause:
        enhanced += f" {clause}"

    if request.negative_prompt:
        enhanced += f" Avoid: {request.negative_prompt}."

    if request.reference_image_base64:
        enhanced = f"{REFERENCE_IMAGE_INSTRUCTION} {enhanced}"

    return enhanced
