"""
API Dependencies

Provides dependency injection for API endpoints.
Manages singleton instances of core components.
"""

from jobprep.config.settings import get_settings
from jobprep.core.generation_client import GeminiGenerationClient
from jobprep.core.outreach import OutreachGenerator
from jobprep.core.profile_reader import InMemoryProfileReader
from jobprep.core.retrying_generator import RetryingGenerator
from jobprep.core.session_orchestrator import SessionOrchestrator


# ============================================================================
# SINGLETON INSTANCES
# ============================================================================

_client: GeminiGenerationClient | None = None
_profile_reader: InMemoryProfileReader | None = None
_orchestrator: SessionOrchestrator | None = None
_outreach: OutreachGenerator | None = None


def get_generation_client() -> GeminiGenerationClient:
    """Get the shared generation client."""
    global _client

    if _client is None:
        _client = GeminiGenerationClient(get_settings())

    return _client


def get_profile_reader() -> InMemoryProfileReader:
    """Get the shared profile reader."""
    global _profile_reader

    if _profile_reader is None:
        _profile_reader = InMemoryProfileReader()

    return _profile_reader


def get_orchestrator() -> SessionOrchestrator:
    """
    Get the session orchestrator singleton.

    Lazily initializes all required components.
    """
    global _orchestrator

    if _orchestrator is None:
        client = get_generation_client()
        _orchestrator = SessionOrchestrator(
            generator=RetryingGenerator(client),
            profile_reader=get_profile_reader(),
            settings=get_settings(),
            score_recorder=client.record_score,
        )

    return _orchestrator


def get_outreach_generator() -> OutreachGenerator:
    """Get the outreach generator singleton."""
    global _outreach

    if _outreach is None:
        _outreach = OutreachGenerator(
            generator=RetryingGenerator(get_generation_client()),
            profile_reader=get_profile_reader(),
            settings=get_settings(),
        )

    return _outreach


async def cleanup():
    """Cleanup resources on shutdown."""
    global _client, _profile_reader, _orchestrator, _outreach

    if _client:
        await _client.close()

    _client = None
    _profile_reader = None
    _orchestrator = None
    _outreach = None
