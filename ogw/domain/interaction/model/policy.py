"""Policy chain: ordered prompts, each gated by checks."""

from collections.abc import Awaitable, Callable, Iterable, Iterator
from dataclasses import dataclass
from enum import Enum

from ogw.domain.account.model.account import Account
from ogw.domain.interaction.model.context import InteractionContext
from ogw.domain.shared.error import ConfigurationError


class Verdict(Enum):
    NO_NEED_TO_PROMPT = "no_need_to_prompt"
    REQUEST_PROMPT = "request_prompt"

    @classmethod
    def prompt_if(cls, condition: bool) -> "Verdict":
        return cls.REQUEST_PROMPT if condition else cls.NO_NEED_TO_PROMPT


CheckFn = Callable[[InteractionContext, Account | None], Awaitable[Verdict]]


@dataclass(frozen=True)
class Check:
    """A predicate gating a prompt."""

    name: str
    description: str
    evaluate: CheckFn
    error: str = "interaction_required"

    async def __call__(self, ctx: InteractionContext) -> Verdict:
        return await self.evaluate(ctx, ctx.account)


@dataclass(frozen=True)
class Prompt:
    """A named interaction checkpoint. Satisfied only when all checks pass."""

    name: str
    checks: tuple[Check, ...] = ()
    requestable: bool = True

    async def pending(self, ctx: InteractionContext) -> Check | None:
        """The first check requesting this prompt, or None if satisfied."""
        for check in self.checks:
            if await check(ctx) is Verdict.REQUEST_PROMPT:
                return check
        return None

    def with_check(self, check: Check) -> "Prompt":
        return Prompt(name=self.name, checks=(*self.checks, check), requestable=self.requestable)


class PolicyChain:
    """Immutable, totally ordered list of prompts.

    Evaluation always starts from the top and stops at the first unsatisfied
    prompt; later prompts are not evaluated in that pass.
    """

    def __init__(self, prompts: Iterable[Prompt]) -> None:
        self._prompts: tuple[Prompt, ...] = tuple(prompts)
        names = [p.name for p in self._prompts]
        if len(set(names)) != len(names):
            raise ConfigurationError(f"Duplicate prompt names in policy chain: {names}")

    def __iter__(self) -> Iterator[Prompt]:
        return iter(self._prompts)

    def __len__(self) -> int:
        return len(self._prompts)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(p.name for p in self._prompts)

    def get(self, name: str) -> Prompt | None:
        return next((p for p in self._prompts if p.name == name), None)

    async def first_pending(self, ctx: InteractionContext) -> Prompt | None:
        """The first prompt whose checks are not all satisfied, or None."""
        for prompt in self._prompts:
            if await prompt.pending(ctx) is not None:
                return prompt
        return None


class PolicyChainBuilder:
    """Explicit builder for a PolicyChain."""

    def __init__(self, prompts: Iterable[Prompt] = ()) -> None:
        self._prompts: list[Prompt] = list(prompts)

    def add(self, prompt: Prompt, index: int | None = None) -> "PolicyChainBuilder":
        """Insert `prompt` at `index` (append when None)."""
        if any(p.name == prompt.name for p in self._prompts):
            raise ConfigurationError(f"Prompt already registered: {prompt.name}")
        if index is None:
            self._prompts.append(prompt)
        else:
            self._prompts.insert(index, prompt)
        return self

    def add_check(self, prompt_name: str, check: Check) -> "PolicyChainBuilder":
        """Append `check` after the existing checks of the named prompt."""
        for i, prompt in enumerate(self._prompts):
            if prompt.name == prompt_name:
                self._prompts[i] = prompt.with_check(check)
                return self
        raise ConfigurationError(f"Unknown prompt: {prompt_name}")

    def build(self) -> PolicyChain:
        return PolicyChain(self._prompts)
