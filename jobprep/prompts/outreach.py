"""
Outreach Prompt Templates

Contains the prompt for personalized networking and referral messages.
"""

from jobprep.models.requests import OutreachRequest
from jobprep.prompts.common import JSON_ONLY_RULE


class OutreachPrompts:
    """Prompt templates for networking outreach."""

    SYSTEM_CONTEXT = """You are an expert professional networking and referral request writer.

Your messages:
- Are warm and relationship-appropriate
- Clearly communicate the opportunity and why the candidate is a good fit
- Show genuine appreciation for the contact's time and help
- Are concise but comprehensive (2-3 short paragraphs)
- Feel authentic and never templated
"""

    def generate_outreach_prompt(self, request: OutreachRequest) -> str:
        """Generate prompt for an outreach message."""

        contact = request.contact
        candidate = request.candidate
        job = request.job

        contact_lines = [f"- Name: {contact.name}"]
        if contact.company:
            contact_lines.append(f"- Company: {contact.company}")
        if contact.job_title:
            contact_lines.append(f"- Title: {contact.job_title}")
        relationship = contact.relationship_phrase()
        if relationship:
            contact_lines.append(f"- Relationship: {relationship}")

        job_lines = [f"- Position: {job.title}", f"- Company: {job.company}"]
        if job.description:
            job_lines.append(f"- Description: {job.description}")

        contact_block = "\n".join(contact_lines)
        job_block = "\n".join(job_lines)

        prompt = f"""{self.SYSTEM_CONTEXT}

=== CANDIDATE INFORMATION ===
- Name: {candidate.display_name}
- Location: {candidate.location or 'Not specified'}
- Background: {candidate.background}

=== CONTACT INFORMATION ===
{contact_block}

=== JOB OPPORTUNITY ===
{job_block}

=== MESSAGE PURPOSE ===
{request.purpose.guidance}

=== STYLE GUIDANCE ===
{request.style.guidance}

=== YOUR TASK ===
Write the message.

Requirements:
1. Address the contact by name ({contact.name})
2. Open with a greeting that fits the relationship
3. Clearly describe the opportunity ({job.title} at {job.company})
4. Make a clear but respectful request or call-to-action
5. Express gratitude and close with the candidate's name
6. Provide a professional subject line
7. Provide 1-5 short tips for sending this message effectively

{JSON_ONLY_RULE}

{{
    "subject": "A professional subject line",
    "message": "The complete message text",
    "tips": ["Tip 1", "Tip 2", "Tip 3"]
}}"""

        return prompt
