"""Reply builders and fake text generators shared by the tests."""

import json

from jobprep.core.exceptions import UpstreamError
from jobprep.core.retrying_generator import RetryingGenerator


# ============================================================================
# REPLY BUILDERS
# ============================================================================

def question_payload(qid, category="behavioral", difficulty="medium", text=None):
    return {
        "id": qid,
        "question": text or f"Question {qid}?",
        "category": category,
        "difficulty": difficulty,
        "expectedPoints": ["First point", "Second point"],
    }


def question_set_reply(*categories):
    questions = [question_payload(str(i), category) for i, category in enumerate(categories, 1)]
    return json.dumps({"questions": questions})


def evaluation_reply(score, **overrides):
    payload = {
        "score": score,
        "strengths": ["Clear structure"],
        "improvements": ["More metrics"],
        "detailedFeedback": "Solid answer overall.",
    }
    payload.update(overrides)
    return json.dumps(payload)


def summary_reply(**overrides):
    payload = {
        "strengths": ["Communication", "Ownership", "Structure"],
        "areasForImprovement": ["Depth", "Metrics", "Brevity"],
        "confidenceTips": ["Practice aloud", "Use STAR", "Slow down"],
        "detailedAnalysis": "A consistent performance with room to grow.",
    }
    payload.update(overrides)
    return json.dumps(payload)


def outreach_reply(**overrides):
    payload = {
        "subject": "Referral for Backend Engineer",
        "message": "Hi Dana, I hope you're well...",
        "tips": ["Send on a weekday morning", "Attach your resume"],
    }
    payload.update(overrides)
    return json.dumps(payload)


# ============================================================================
# FAKE MODELS
# ============================================================================

class ScriptedClient:
    """Returns (or raises) a fixed sequence of replies."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []

    async def generate(self, instruction, options=None):
        self.calls.append((instruction, options))
        reply = self.replies.pop(0)
        if isinstance(reply, UpstreamError):
            raise reply
        return reply

    @property
    def instructions(self):
        return [instruction for instruction, _ in self.calls]


class RoutingClient:
    """Answers by operation name; handlers receive the instruction text."""

    def __init__(self, **handlers):
        self.handlers = handlers
        self.calls = []

    async def generate(self, instruction, options=None):
        self.calls.append((instruction, options))
        reply = self.handlers[options.operation](instruction)
        if hasattr(reply, "__await__"):
            reply = await reply
        if isinstance(reply, UpstreamError):
            raise reply
        return reply

    def operations(self):
        return [options.operation for _, options in self.calls]


def make_generator(client, **kwargs):
    kwargs.setdefault("max_contract_attempts", 2)
    kwargs.setdefault("max_transient_attempts", 3)
    kwargs.setdefault("backoff_seconds", 0)
    return RetryingGenerator(client, **kwargs)
