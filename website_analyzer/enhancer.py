"""
Optional AI rewrite of the extracted description using Gemini.

enhance_description() never raises: on any failure it logs the error and
hands back the original text with was_enhanced=False.
"""

from dataclasses import dataclass
from typing import Optional

import google.generativeai as genai

from . import config


@dataclass(frozen=True)
class EnhancementResult:
    text: str
    was_enhanced: bool


def build_enhancement_prompt(text: str, brand_name: Optional[str] = None) -> str:
    """Prompt asking for exactly one 1-2 sentence rewrite."""
    subject = brand_name or 'this website'
    return (
        f"Rewrite the following website description for {subject}. "
        "Make it clear, professional, and engaging in **one version only**. "
        "Do not include quotes, options, bullet points, or multiple variations. "
        "Just return the final enhanced description in 1-2 sentences:\n\n"
        f"{text}"
    )


def get_model():
    """Configured Gemini model, or None if no API key is set."""
    if not config.GEMINI_API_KEY:
        return None
    genai.configure(api_key=config.GEMINI_API_KEY)
    return genai.GenerativeModel(config.GEMINI_MODEL)


def enhance_description(text: str, brand_name: Optional[str] = None, model=None) -> EnhancementResult:
    """
    Rewrite a description with Gemini, falling back to the original.

    Args:
        text: The extracted description
        brand_name: Brand to mention in the prompt (optional)
        model: Object with a generate_content() method; defaults to Gemini

    Returns:
        EnhancementResult. was_enhanced is True only if the call succeeded
        and returned non-empty text that differs from the input.
    """
    unchanged = EnhancementResult(text=text, was_enhanced=False)

    if not text:
        return unchanged

    try:
        if model is None:
            model = get_model()
        if model is None:
            print("Enhancement skipped: GEMINI_API_KEY not configured")
            return unchanged

        response = model.generate_content(
            build_enhancement_prompt(text, brand_name),
            request_options={'timeout': config.ENHANCE_TIMEOUT_SECONDS},
        )
        enhanced = (response.text or '').strip()
    except Exception as e:
        # Quota, network, blocked or malformed responses all land here
        print(f"Gemini enhancement error: {e}")
        return unchanged

    if enhanced and enhanced != text:
        return EnhancementResult(text=enhanced, was_enhanced=True)
    return unchanged
