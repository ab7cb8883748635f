"""Text-to-ticket extraction.

Usage:
    from services.ticket_extractor.extractor import parse_ticket_text

    ticket = await parse_ticket_text("G123次列车 北京南-上海虹桥 10月1日 08:00")
    if ticket is None:
        ...  # could not recognize, fall back to manual entry
"""
from __future__ import annotations

import logging
from typing import Optional, Union

from core.failures import ExtractionError, Failure, FailureCategory
from core.ticket import TicketRecord, normalize
from services.ticket_extractor import providers
from services.ticket_extractor.settings import ProviderConfig, resolve

log = logging.getLogger(__name__)


async def extract(raw_text: str, config: ProviderConfig) -> Union[TicketRecord, Failure]:
    """Run one extraction attempt under the given provider configuration.

    Blank text is not special-cased here; callers reject it first.

    Returns:
        A normalized ``TicketRecord``, or the ``Failure`` that stopped it
    """
    strategy = providers.STRATEGIES[config.provider]
    try:
        raw = await strategy(raw_text, config)
    except ExtractionError as e:
        return e.failure
    except Exception as e:
        log.exception(f"Unexpected error during {config.provider.value} extraction")
        return Failure(FailureCategory.PROVIDER_ERROR, f"Unexpected error: {e}")
    return normalize(raw)


async def parse_ticket_text(text: str, config: Optional[ProviderConfig] = None) -> Optional[TicketRecord]:
    """Extract a ticket, collapsing every failure kind to ``None``.

    Settings are read fresh when no configuration is passed in.
    """
    config = config or resolve()
    outcome = await extract(text, config)
    if isinstance(outcome, Failure):
        log.error(f"Ticket extraction via {config.provider.value} failed: {outcome.to_payload()}")
        return None
    return outcome
