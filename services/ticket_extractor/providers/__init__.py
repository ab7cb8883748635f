"""Extraction paths, keyed by provider capability.

Both Gemini variants use schema-constrained generation; the OpenAI-compatible
variant goes through chat completions with manual JSON cleanup.
"""
from typing import Dict

from services.ticket_extractor.providers.base import ExtractStrategy
from services.ticket_extractor.providers.gemini import extract_structured
from services.ticket_extractor.providers.openai_compat import extract_chat
from services.ticket_extractor.settings import ProviderKind

STRATEGIES: Dict[ProviderKind, ExtractStrategy] = {
    kind: extract_structured if kind.is_generative else extract_chat for kind in ProviderKind
}

__all__ = [
    "ExtractStrategy",
    "STRATEGIES",
    "extract_chat",
    "extract_structured",
]
