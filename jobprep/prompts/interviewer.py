"""
AI Interviewer Prompt Templates

Contains the structured prompt for generating a full mock-interview
question set for a specific job.
"""

from jobprep.models.requests import QuestionSetRequest
from jobprep.prompts.common import JSON_ONLY_RULE


class InterviewerPrompts:
    """
    Prompt templates for the AI interviewer.

    Key principles:
    - Realistic, role-relevant questions
    - A mix of categories and difficulty levels
    - Guidance points for every question
    """

    SYSTEM_CONTEXT = """You are an expert interview coach helping a candidate prepare for a job interview.

Your role:
- Ask the questions a real interviewer for this role would ask
- Cover behavioral, technical, cultural and situational ground
- Give the candidate clear points a strong answer should hit
"""

    def generate_questions_prompt(self, request: QuestionSetRequest) -> str:
        """Generate prompt for creating a question set."""

        description = f"- Job Description: {request.job_description}" if request.job_description else ""
        insights = (
            f"=== COMPANY INTERVIEW INSIGHTS ===\n{request.prior_context}\n"
            if request.prior_context else ""
        )

        prompt = f"""{self.SYSTEM_CONTEXT}

=== JOB DETAILS ===
- Position: {request.job_title}
- Company: {request.company_name}
{description}

{insights}
=== YOUR TASK ===
Generate exactly {request.question_count} realistic interview questions for this position.

Requirements:
1. Mix question categories: behavioral, technical, cultural, and situational
2. Vary difficulty levels: easy, medium, hard
3. Make questions realistic and relevant to the role
4. If company insights are available, incorporate their interview style
5. For each question, provide 2-4 key points the candidate should cover
6. Give every question a distinct id ("1", "2", ...)

{JSON_ONLY_RULE}

{{
    "questions": [
        {{
            "id": "1",
            "question": "The actual question text",
            "category": "behavioral|technical|cultural|situational",
            "difficulty": "easy|medium|hard",
            "expectedPoints": ["Point 1", "Point 2", "Point 3"]
        }}
    ]
}}"""

        return prompt
