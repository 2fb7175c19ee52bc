"""
JobPrep - Structured AI generation for a job-search assistant

Generates mock-interview questions, per-answer evaluations, end-of-session
performance summaries and networking outreach messages from a hosted
language model, validating every reply against a strict output contract.
"""

__version__ = "0.1.0"
__author__ = "JobPrep Team"
