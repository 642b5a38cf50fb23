"""
ACP Binding Classifier

Grades the link between token control and the authoritative control
point. The caller's necessary/sufficient assertions gate the result:

    both true      -> strong
    exactly one    -> moderate
    neither        -> weak
    no framework   -> none

Under BindingPolicy.MINIMUM the result is additionally capped by the
strongest acp_binding declared on the resolved frameworks.
"""
from __future__ import annotations

from typing import Sequence

from ..models import BindingPolicy, BindingStrength, ControlFramework


def binding_from_flags(is_necessary: bool, is_sufficient: bool) -> BindingStrength:
    """Binding strength implied by the caller's assertions alone."""
    if is_necessary and is_sufficient:
        return BindingStrength.STRONG
    if is_necessary or is_sufficient:
        return BindingStrength.MODERATE
    return BindingStrength.WEAK


def classify(
    control_frameworks: Sequence[ControlFramework],
    is_necessary: bool,
    is_sufficient: bool,
    policy: BindingPolicy = BindingPolicy.CALLER_FLAGS,
) -> BindingStrength:
    """
    Classify ACP binding strength.

    Args:
        control_frameworks: Frameworks resolved for the scenario
        is_necessary: Token control is a necessary credential
        is_sufficient: Token instruction is sufficient for the ACP
        policy: Reconciliation with the frameworks' declared binding
    """
    if not control_frameworks:
        return BindingStrength.NONE

    strength = binding_from_flags(is_necessary, is_sufficient)
    if policy == BindingPolicy.MINIMUM:
        declared = max((cf.acp_binding for cf in control_frameworks), key=lambda b: b.rank)
        if declared.rank < strength.rank:
            return declared
    return strength
