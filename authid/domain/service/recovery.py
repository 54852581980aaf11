"""Recovery classification.

Pure functions over a user's identifier snapshot. Nothing here is cached
or persisted: callers recompute on every read so that a trust decision is
never taken on a level computed before the last mutation.
"""

from collections.abc import Sequence

from authid.config import IdentifierPolicySettings
from authid.domain.model.identifier import Identifier
from authid.domain.value import IdentifierType, RecoveryAction, RecoveryLevel


def classify_recovery_level(
    identifiers: Sequence[Identifier],
    policy: IdentifierPolicySettings | None = None,
) -> RecoveryLevel:
    """Classify how recoverable an account is.

    Rules, first match wins:
    1. FULL - a verified contact identifier (email, phone)
    2. PARTIAL - a verified federated identifier (oauth)
    3. PSEUDONYMOUS - any identifier other than the anonymous marker
    4. ANONYMOUS - nothing else

    Args:
        identifiers: The user's identifiers
        policy: Type routing (defaults apply when omitted)

    Returns:
        The recovery level
    """
    policy = policy or IdentifierPolicySettings()

    if any(i.verified and i.type in policy.contact_types for i in identifiers):
        return RecoveryLevel.FULL
    if any(i.verified and i.type in policy.federated_types for i in identifiers):
        return RecoveryLevel.PARTIAL
    if any(i.type != IdentifierType.ANONYMOUS for i in identifiers):
        return RecoveryLevel.PSEUDONYMOUS
    return RecoveryLevel.ANONYMOUS


def suggest_recovery_actions(
    identifiers: Sequence[Identifier],
    policy: IdentifierPolicySettings | None = None,
) -> list[RecoveryAction]:
    """Suggest recovery actions for the user's current level.

    Args:
        identifiers: The user's identifiers
        policy: Type routing (defaults apply when omitted)

    Returns:
        Actions, most useful first
    """
    policy = policy or IdentifierPolicySettings()
    level = classify_recovery_level(identifiers, policy)
    has_federated = any(
        i.verified and i.type in policy.federated_types for i in identifiers
    )
    has_unverified_contact = any(
        not i.verified and i.type in policy.contact_types for i in identifiers
    )

    if level is RecoveryLevel.FULL:
        actions = [RecoveryAction.RESET_PASSWORD]
        if has_federated:
            actions.append(RecoveryAction.OAUTH_RECOVERY)
        return actions

    if level is RecoveryLevel.PARTIAL:
        actions = [RecoveryAction.OAUTH_RECOVERY]
        if has_unverified_contact:
            actions.append(RecoveryAction.VERIFY_IDENTIFIER)
        actions.append(RecoveryAction.ADD_RECOVERY_EMAIL)
        return actions

    if level is RecoveryLevel.PSEUDONYMOUS:
        actions = []
        if has_unverified_contact:
            actions.append(RecoveryAction.VERIFY_IDENTIFIER)
        actions.append(RecoveryAction.ADD_RECOVERY_EMAIL)
        return actions

    return [RecoveryAction.ACCOUNT_UPGRADE]
