"""Display-only advisory text about recent rounds.

Providers implement ``BaseAdvisor``; ``AdvisoryService`` decides when to
ask and swaps in the fallback reading whenever a provider fails.
"""
import logging

from .base import BaseAdvisor, Insight, RISK_LEVELS
from .fallback import FallbackAdvisor, NEUTRAL_INSIGHT
from .service import AdvisoryService, run_inline

logger = logging.getLogger(__name__)


def create_advisor(name: str, api_key: str = '', model: str = 'gemini-2.5-flash') -> BaseAdvisor:
    """Create the configured advisor, falling back to the offline one."""
    if name == 'gemini':
        from .gemini import GeminiAdvisor
        return GeminiAdvisor(api_key=api_key, model=model)
    if name != 'fallback':
        logger.warning(f"[advisor] unknown provider {name!r}, using fallback")
    return FallbackAdvisor()


__all__ = [
    'BaseAdvisor', 'Insight', 'RISK_LEVELS', 'FallbackAdvisor', 'NEUTRAL_INSIGHT',
    'AdvisoryService', 'run_inline', 'create_advisor',
]
