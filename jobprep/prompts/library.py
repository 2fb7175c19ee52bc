"""
Prompt dispatch for JobPrep

Maps any generation request to its instruction string by the request's kind.
"""

from jobprep.models.requests import GenerationRequest
from jobprep.prompts.evaluator import EvaluatorPrompts
from jobprep.prompts.interviewer import InterviewerPrompts
from jobprep.prompts.outreach import OutreachPrompts
from jobprep.prompts.summary import SummaryPrompts

_TEMPLATES = {
    "question_set": InterviewerPrompts().generate_questions_prompt,
    "evaluation": EvaluatorPrompts().generate_evaluation_prompt,
    "summary": SummaryPrompts().generate_summary_prompt,
    "outreach": OutreachPrompts().generate_outreach_prompt,
}


def render_prompt(request: GenerationRequest) -> str:
    """Build the instruction for a request of any kind."""
    return _TEMPLATES[request.kind](request)
