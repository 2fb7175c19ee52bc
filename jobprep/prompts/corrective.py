"""
Corrective Prompt Template

Re-issues an instruction after the model's reply violated its contract,
showing the model its own reply and exactly what was wrong with it.
"""

from typing import TYPE_CHECKING

from jobprep.prompts.common import JSON_ONLY_RULE

if TYPE_CHECKING:
    from jobprep.core.exceptions import ContractViolation

INVALID_REPLY_CHARS = 2000


def build_corrective_prompt(original_prompt: str, invalid_reply: str, violation: "ContractViolation") -> str:
    """Build a follow-up instruction for a reply that failed validation."""

    reply = invalid_reply.strip()
    if len(reply) > INVALID_REPLY_CHARS:
        reply = reply[:INVALID_REPLY_CHARS] + "... [truncated]"

    return f"""{original_prompt}

=== YOUR PREVIOUS REPLY ===
{reply}

=== PROBLEMS WITH YOUR PREVIOUS REPLY ===
[{violation.kind.value}]
{violation.describe()}

=== CORRECTION REQUIRED ===
Your previous reply did not match the required output format.
Return the complete corrected JSON object, fixing every problem listed above
and keeping the exact field names, allowed values and ranges shown in the example.

{JSON_ONLY_RULE}"""
