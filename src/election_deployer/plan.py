"""Deployment plan construction and validation for election-deployer."""

from typing import Any, Iterable, Optional, Sequence, Set, Tuple

from .constants import (
    DEFAULT_MIN_VOTING_AGE,
    DEFAULT_TOKEN_NAME,
    DEFAULT_TOKEN_SYMBOL,
    ELECTION_FACTORY,
    VOTER_REGISTRY,
    VOTING_TOKEN,
)
from .exceptions import PlanDefinitionError, UnresolvedDependencyError
from .types import ContractRef, ContractSpec


def ref(name: str) -> ContractRef:
    """Reference the deployed address of contract `name`."""
    return ContractRef(name)


def contract(name: str, *args: Any, depends_on: Optional[Iterable[str]] = None) -> ContractSpec:
    """
    Build a ContractSpec.

    Args:
        name: Contract name (matches the compiled artifact name)
        *args: Constructor arguments, literals or ref() values
        depends_on: Explicit dependency names. Derived from the refs in
                    args (first appearance order) when omitted.

    Returns:
        ContractSpec
    """
    if depends_on is None:
        derived = []
        for arg in args:
            if isinstance(arg, ContractRef) and arg.name not in derived:
                derived.append(arg.name)
        depends_on = derived

    return ContractSpec(name=name, constructor_args=tuple(args), depends_on=tuple(depends_on))


def validate_plan(specs: Sequence[ContractSpec]) -> Tuple[ContractSpec, ...]:
    """
    Check that a plan can be deployed in the given order.

    Every dependency must appear strictly earlier in the plan, so self
    references and cycles are rejected here rather than during deployment.

    Args:
        specs: Ordered contract specs

    Returns:
        The specs as a tuple

    Raises:
        PlanDefinitionError: On duplicate names or refs not declared as dependencies
        UnresolvedDependencyError: On self, forward, or unknown dependencies
    """
    seen: Set[str] = set()

    for spec in specs:
        if spec.name in seen:
            raise PlanDefinitionError(f"Contract '{spec.name}' appears more than once in the plan")

        for dependency in spec.depends_on:
            if dependency not in seen:
                raise UnresolvedDependencyError(spec.name, dependency)

        for name in spec.references():
            if name not in spec.depends_on:
                raise PlanDefinitionError(
                    f"Contract '{spec.name}' references '{name}' without declaring it as a dependency"
                )

        seen.add(spec.name)

    return tuple(specs)


def election_plan(
    token_name: str = DEFAULT_TOKEN_NAME,
    token_symbol: str = DEFAULT_TOKEN_SYMBOL,
    min_voting_age: int = DEFAULT_MIN_VOTING_AGE,
) -> Tuple[ContractSpec, ...]:
    """
    Return the canonical deployment plan, shared by every network.

    ElectionFactory takes the registry and token addresses, so both are
    deployed first.
    """
    return validate_plan(
        [
            contract(VOTING_TOKEN, token_name, token_symbol),
            contract(VOTER_REGISTRY, min_voting_age),
            contract(ELECTION_FACTORY, ref(VOTER_REGISTRY), ref(VOTING_TOKEN)),
        ]
    )
