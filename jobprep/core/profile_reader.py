"""
Profile and job data reader.

The core only ever reads job and candidate fields to interpolate into
prompts. Persistence lives elsewhere; this module defines the read-only
interface and an in-memory implementation.
"""

from typing import Protocol

from jobprep.models.outreach import CandidateProfile, JobContext


class ProfileReader(Protocol):
    """Read-only access to stored jobs and candidate profiles."""

    def get_job(self, job_id: str) -> JobContext | None:
        ...

    def get_candidate(self, user_id: str) -> CandidateProfile | None:
        ...


class InMemoryProfileReader:
    """Dictionary-backed ProfileReader."""

    def __init__(
        self,
        jobs: dict[str, JobContext] | None = None,
        candidates: dict[str, CandidateProfile] | None = None,
    ):
        self._jobs = dict(jobs or {})
        self._candidates = dict(candidates or {})

    def add_job(self, job_id: str, job: JobContext):
        self._jobs[job_id] = job

    def add_candidate(self, user_id: str, candidate: CandidateProfile):
        self._candidates[user_id] = candidate

    def get_job(self, job_id: str) -> JobContext | None:
        return self._jobs.get(job_id)

    def get_candidate(self, user_id: str) -> CandidateProfile | None:
        return self._candidates.get(user_id)
