"""
AI prompt templates for JobPrep

Contains structured prompts for:
- Question generation
- Answer evaluation
- Session summary
- Outreach messages
- Corrective follow-ups after contract violations
- Dispatch from any generation request to its template
"""

from jobprep.prompts.interviewer import InterviewerPrompts
from jobprep.prompts.evaluator import EvaluatorPrompts
from jobprep.prompts.summary import SummaryPrompts
from jobprep.prompts.outreach import OutreachPrompts
from jobprep.prompts.corrective import build_corrective_prompt
from jobprep.prompts.library import render_prompt

__all__ = [
    "InterviewerPrompts",
    "EvaluatorPrompts",
    "SummaryPrompts",
    "OutreachPrompts",
    "build_corrective_prompt",
    "render_prompt",
]
