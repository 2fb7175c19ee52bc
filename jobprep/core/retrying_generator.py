"""
Retrying Generator for JobPrep

Owns all retry policy for structured generation. One ``run`` call is a
single fallible operation to its caller: it either returns a
contract-validated value or raises TerminalFailure.

Two independent budgets:
- Contract faults (MalformedOutput, SchemaViolation) are retried with a
  corrective instruction, up to ``max_attempts`` validated replies.
- Upstream faults (unavailable, timeout, refused) are retried with the
  same instruction after a fixed backoff, up to ``max_transient_attempts``.
"""

import asyncio
import logging
from typing import Any, Callable, TypeVar

from pydantic import BaseModel

from jobprep.config.settings import get_settings
from jobprep.core.contract_validator import validate
from jobprep.core.contracts import Contract
from jobprep.core.exceptions import ContractViolation, TerminalFailure, UpstreamError
from jobprep.core.generation_client import GenerationOptions, TextGenerator
from jobprep.prompts.corrective import build_corrective_prompt

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)
R = TypeVar("R")


class RetryingGenerator:
    """
    Template -> generate -> validate loop with bounded retries.

    Callers never see an unvalidated value and never get a default
    substituted for a failed generation.
    """

    def __init__(
        self,
        client: TextGenerator,
        max_contract_attempts: int | None = None,
        max_transient_attempts: int | None = None,
        backoff_seconds: float | None = None,
    ):
        """
        Initialize the generator.

        Args:
            client: Single-call text generator
            max_contract_attempts: Default corrective budget (settings if omitted)
            max_transient_attempts: Upstream-fault budget (settings if omitted)
            backoff_seconds: Fixed delay before re-issuing after an upstream fault
        """
        settings = get_settings()
        self.client = client
        self.max_contract_attempts = (
            settings.max_contract_attempts if max_contract_attempts is None else max_contract_attempts
        )
        self.max_transient_attempts = (
            settings.max_transient_attempts if max_transient_attempts is None else max_transient_attempts
        )
        self.backoff_seconds = (
            settings.retry_backoff_seconds if backoff_seconds is None else backoff_seconds
        )
        if self.max_contract_attempts < 1 or self.max_transient_attempts < 1:
            raise ValueError("Retry budgets must allow at least one attempt")

    async def run(
        self,
        template_fn: Callable[[R], str],
        request: R,
        contract: Contract[T],
        max_attempts: int | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> T:
        """
        Generate a contract-valid value for one request.

        Args:
            template_fn: Prompt template for the request type
            request: Typed input record
            contract: Output contract the reply must satisfy
            max_attempts: Corrective budget override for this call
            metadata: Extra trace metadata (e.g. session_id)

        Returns:
            The validated reply, typed as the contract's model

        Raises:
            TerminalFailure: Either budget was exhausted
            ValueError: If max_attempts is below 1
        """
        if max_attempts is None:
            max_attempts = self.max_contract_attempts
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        instruction = template_fn(request)
        current = instruction

        calls = 0
        contract_attempts = 0
        transient_failures = 0

        while True:
            calls += 1
            options = GenerationOptions(
                operation=contract.name,
                attempt=calls,
                metadata=metadata or {},
            )

            try:
                raw_reply = await self.client.generate(current, options)
            except UpstreamError as e:
                transient_failures += 1
                if transient_failures >= self.max_transient_attempts:
                    logger.error(
                        f"{contract.name}: giving up after {transient_failures} upstream "
                        f"fault(s), last={e.kind.value}"
                    )
                    raise TerminalFailure(contract.name, e, calls) from e
                logger.warning(
                    f"{contract.name}: upstream {e.kind.value} "
                    f"({transient_failures}/{self.max_transient_attempts}), "
                    f"retrying in {self.backoff_seconds}s"
                )
                await asyncio.sleep(self.backoff_seconds)
                continue

            contract_attempts += 1
            try:
                value = validate(raw_reply, contract)
            except ContractViolation as e:
                if contract_attempts >= max_attempts:
                    logger.error(
                        f"{contract.name}: reply still invalid after {contract_attempts} "
                        f"attempt(s), last={e.kind.value}"
                    )
                    raise TerminalFailure(contract.name, e, calls) from e
                logger.warning(
                    f"{contract.name}: {e.kind.value} on attempt {contract_attempts}/{max_attempts}, "
                    f"sending corrective instruction"
                )
                current = build_corrective_prompt(instruction, raw_reply, e)
                continue

            if calls > 1:
                logger.info(f"{contract.name}: valid reply after {calls} call(s)")
            return value
