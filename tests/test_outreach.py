import asyncio

import pytest

from jobprep.core.exceptions import FailureKind, TerminalFailure
from jobprep.core.outreach import OutreachGenerator
from jobprep.core.profile_reader import InMemoryProfileReader
from jobprep.models.outreach import (
    CandidateProfile,
    ContactContext,
    JobContext,
    OutreachPurpose,
    OutreachStyle,
)
from tests.helpers import ScriptedClient, make_generator, outreach_reply

CONTACT = ContactContext(name="Dana", company="Acme", job_title="Staff Engineer", relationship_strength=7)


def test_generates_validated_message(settings):
    client = ScriptedClient(outreach_reply())
    generator = OutreachGenerator(make_generator(client), settings=settings)

    message = asyncio.run(generator.generate_outreach_message(
        CONTACT,
        JobContext(title="Backend Engineer", company="Acme"),
        style=OutreachStyle.DIRECT,
    ))

    assert message.subject == "Referral for Backend Engineer"
    assert message.tips == ["Send on a weekday morning", "Attach your resume"]
    prompt, options = client.calls[0]
    assert options.operation == "outreach"
    assert OutreachStyle.DIRECT.guidance in prompt
    assert OutreachPurpose.REFERRAL_REQUEST.guidance in prompt
    assert "good professional relationship" in prompt


def test_job_description_is_clipped(settings):
    client = ScriptedClient(outreach_reply())
    generator = OutreachGenerator(make_generator(client), settings=settings)
    description = "d" * (settings.outreach_description_char_limit + 200)

    asyncio.run(generator.generate_outreach_message(
        CONTACT, JobContext(title="Backend Engineer", company="Acme", description=description)
    ))

    prompt = client.calls[0][0]
    assert "d" * settings.outreach_description_char_limit + "..." in prompt
    assert description not in prompt


def test_candidate_is_read_from_profile(settings):
    client = ScriptedClient(outreach_reply())
    reader = InMemoryProfileReader(candidates={
        "user-1": CandidateProfile(full_name="Sam Lee", bio="Eight years building payment systems", location="Berlin"),
    })
    generator = OutreachGenerator(make_generator(client), profile_reader=reader, settings=settings)

    asyncio.run(generator.generate_outreach_message(
        CONTACT, JobContext(title="Backend Engineer", company="Acme"), user_id="user-1"
    ))

    prompt = client.calls[0][0]
    assert "Name: Sam Lee" in prompt
    assert "Eight years building payment systems" in prompt
    assert "Location: Berlin" in prompt


def test_invalid_replies_are_terminal(settings):
    client = ScriptedClient(outreach_reply(tips=[]), outreach_reply(message=""))
    generator = OutreachGenerator(make_generator(client), settings=settings)

    with pytest.raises(TerminalFailure) as exc:
        asyncio.run(generator.generate_outreach_message(CONTACT, JobContext(title="SRE", company="Acme")))

    assert exc.value.kind == FailureKind.SCHEMA_VIOLATION
    assert len(client.calls) == 2
