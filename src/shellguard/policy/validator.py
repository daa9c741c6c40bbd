"""Command validator — resolves pattern and path-scope rules into one decision."""

from __future__ import annotations

from shellguard.models.decision import Action, ValidationResult
from shellguard.models.policy import Policy
from shellguard.policy.matcher import match_pattern
from shellguard.policy.path_scope import check_path


def validate_command(command: str, working_dir: str, policy: Policy) -> ValidationResult:
    """Evaluate ``command`` against ``policy``.

    Precedence is block > confirm > allow. The first enabled category (in
    registration order) whose block pattern matches wins outright; confirm
    matches are only recorded, so a later category can still block. Path-scope
    rules run last and can escalate a pending confirm to a block, but never
    replace it with another confirm or an allow.
    """
    if not policy.enabled:
        return ValidationResult.allow("Security system disabled")

    pending: ValidationResult | None = None

    for name, category in policy.categories.items():
        if not category.enabled:
            continue

        matched = match_pattern(command, category.block_patterns)
        if matched is not None:
            return ValidationResult.block(
                f"Command matches blocked pattern in {name}",
                category=name,
                matched_pattern=matched,
            )

        matched = match_pattern(command, category.confirm_patterns)
        if matched is not None:
            pending = ValidationResult.confirm(
                f"Command requires confirmation for {name}",
                category=name,
                matched_pattern=matched,
            )

    path_result = check_path(command, working_dir, policy.path_restrictions)

    if pending is not None:
        if path_result.action == Action.BLOCK:
            return path_result
        return pending

    if path_result.action != Action.ALLOW:
        return path_result

    return ValidationResult.allow("Command passed security validation")

