"""
AI Evaluator Prompt Templates

Contains the structured prompt for scoring one answer to a mock-interview
question on a 0-100 scale.

Evaluation criteria:
- Content Quality
- Structure
- Relevance
- Communication
- Key Points Coverage
"""

from jobprep.models.requests import EvaluationRequest
from jobprep.prompts.common import JSON_ONLY_RULE, numbered


class EvaluatorPrompts:
    """
    Prompt templates for AI evaluation of answers.

    Key principles:
    - Objective, rubric-based scoring
    - Identify both strengths and gaps
    - Provide actionable feedback
    """

    SYSTEM_CONTEXT = """You are an expert interview coach evaluating a candidate's response to an interview question.

Be fair but thorough. Look for both explicit and implicit understanding.
"""

    EVALUATION_CRITERIA = """
=== EVALUATION CRITERIA ===
1. Content Quality: Does it answer the question? Are examples specific?
2. Structure: Is it well-organized (e.g., STAR method for behavioral)?
3. Relevance: Does it relate to the role and company?
4. Communication: Is it clear and concise?
5. Key Points Coverage: Did they hit the expected points?
"""

    SCORING_RUBRIC = """
=== SCORING RUBRIC (integer 0-100) ===
- 90-100: Excellent response
- 70-89: Good response with minor improvements needed
- 50-69: Average response with notable gaps
- Below 50: Needs significant improvement
"""

    def generate_evaluation_prompt(self, request: EvaluationRequest) -> str:
        """Generate prompt for evaluating an answer."""

        question = request.question
        key_points = ""
        if question.expected_points:
            key_points = f"=== KEY POINTS TO COVER ===\n{numbered(question.expected_points)}\n"

        prompt = f"""{self.SYSTEM_CONTEXT}
{self.EVALUATION_CRITERIA}
{self.SCORING_RUBRIC}
=== INTERVIEW CONTEXT ===
- Position: {request.job_title}
- Company: {request.company_name}
- Question Category: {question.category.value}
- Difficulty Level: {question.difficulty.value}

=== QUESTION ===
{question.text}

{key_points}
=== CANDIDATE'S RESPONSE ===
"{request.answer_text}"

=== YOUR TASK ===
Evaluate this response and provide constructive feedback.
The score MUST be a whole number between 0 and 100.

{JSON_ONLY_RULE}

{{
    "score": 75,
    "strengths": ["Strength 1", "Strength 2"],
    "improvements": ["Improvement 1", "Improvement 2"],
    "detailedFeedback": "A comprehensive 2-3 sentence evaluation of the response."
}}"""

        return prompt
