"""
Core business logic modules for JobPrep

Contains:
- Generation Client: single upstream call to the text model
- Contract Validator: tolerant extraction and strict validation of replies
- Retrying Generator: retry policy for structured generation
- Score Aggregator: deterministic scoring and reconciliation
- Session Orchestrator: state machine for mock interview sessions
- Outreach Generator: networking and referral messages
"""

from jobprep.core.generation_client import GeminiGenerationClient, GenerationOptions
from jobprep.core.contract_validator import extract_json, validate
from jobprep.core.retrying_generator import RetryingGenerator
from jobprep.core.score_aggregator import ScoreAggregator, readiness_for
from jobprep.core.session_orchestrator import SessionOrchestrator
from jobprep.core.outreach import OutreachGenerator
from jobprep.core.profile_reader import InMemoryProfileReader, ProfileReader

__all__ = [
    "GeminiGenerationClient",
    "GenerationOptions",
    "extract_json",
    "validate",
    "RetryingGenerator",
    "ScoreAggregator",
    "readiness_for",
    "SessionOrchestrator",
    "OutreachGenerator",
    "InMemoryProfileReader",
    "ProfileReader",
]
