"""Deployer balance checks for election-deployer."""

import logging
from typing import Optional

from .exceptions import ChainClientError, InsufficientBalanceWarning
from .types import DeploymentContext

logger = logging.getLogger(__name__)


def check_balance(context: DeploymentContext) -> Optional[InsufficientBalanceWarning]:
    """
    Compare the deployer balance with the network's recommended minimum.

    Low balance never halts the pipeline: the estimate is imprecise relative
    to actual gas needs, so the chain is left to reject an underfunded
    transaction.

    Args:
        context: Current deployment context

    Returns:
        InsufficientBalanceWarning if the balance is below the minimum,
        None otherwise (including networks that need no credentials)
    """
    profile = context.profile
    if not profile.requires_credentials:
        return None

    try:
        balance = context.client.get_balance(context.deployer)
    except ChainClientError as e:
        logger.warning("Could not query balance of %s on %s: %s", context.deployer, profile.name, e)
        return None

    logger.info("Account balance: %s ETH", balance)

    if balance >= profile.min_balance:
        return None

    warning = InsufficientBalanceWarning(
        network=profile.name,
        balance=balance,
        minimum=profile.min_balance,
        faucet_hint=profile.faucet_hint,
    )
    logger.warning("%s", warning)
    return warning
