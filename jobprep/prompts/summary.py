"""
AI Summary Prompt Templates

Contains the prompt for the end-of-session performance summary.

The scores are computed in code and handed to the model as facts; the
model only writes the qualitative feedback around them.
"""

from jobprep.models.requests import SummaryRequest
from jobprep.prompts.common import JSON_ONLY_RULE, bulleted


class SummaryPrompts:
    """
    Prompt templates for the session summary.

    Used to produce:
    - Overall strengths and improvement areas
    - Confidence tips
    - A detailed narrative analysis
    """

    SYSTEM_CONTEXT = """You are an expert interview coach providing a comprehensive performance summary after a mock interview.

Your role:
- Provide constructive, actionable feedback
- Be encouraging but honest
- Focus on growth and improvement
"""

    def _transcript(self, request: SummaryRequest) -> str:
        blocks = []
        for i, item in enumerate(request.responses, 1):
            evaluation = item.evaluation
            strengths = "; ".join(evaluation.strengths) or "None noted"
            improvements = "; ".join(evaluation.improvements) or "None noted"
            blocks.append(
                f"Q{i} [{item.question.category.value}, {item.question.difficulty.value}]: {item.question.text}\n"
                f"Answer: {item.answer_text}\n"
                f"Score: {evaluation.score}/100\n"
                f"Strengths: {strengths}\n"
                f"Improvements: {improvements}\n"
                f"Feedback: {evaluation.detailed_feedback}"
            )
        return "\n\n".join(blocks)

    def generate_summary_prompt(self, request: SummaryRequest) -> str:
        """Generate prompt for the overall performance summary."""

        category_lines = bulleted([
            f"{category.value}: {score}/100"
            for category, score in request.category_scores.items()
        ])

        prompt = f"""{self.SYSTEM_CONTEXT}

=== INTERVIEW DETAILS ===
- Position: {request.job_title}
- Company: {request.company_name}
- Total Questions: {request.total_questions}

=== COMPUTED SCORES (final, do not recalculate) ===
Overall Score: {request.overall_score}/100
Readiness Level: {request.readiness_level.value}
Category Scores:
{category_lines}

=== COMPLETE INTERVIEW TRANSCRIPT WITH FEEDBACK ===
{self._transcript(request)}

=== YOUR TASK ===
Analyze the entire interview performance and write the qualitative summary.

Requirements:
1. Identify top 3-5 overall strengths across all responses
2. Identify top 3-5 areas for improvement across all responses
3. Provide 3-5 actionable confidence tips for future interviews
4. Write a detailed 3-4 sentence analysis consistent with the computed scores

{JSON_ONLY_RULE}

{{
    "strengths": ["Strength 1", "Strength 2", "Strength 3"],
    "areasForImprovement": ["Improvement area 1", "Improvement area 2", "Improvement area 3"],
    "confidenceTips": ["Actionable tip 1", "Actionable tip 2", "Actionable tip 3"],
    "readinessLevel": "{request.readiness_level.value}",
    "detailedAnalysis": "Comprehensive analysis of overall performance..."
}}"""

        return prompt
