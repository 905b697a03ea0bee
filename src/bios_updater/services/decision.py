"""Final update decision from catalog lookup and version comparison."""

import logging
from typing import Optional

from bios_updater.errors import NoCandidatePackageError, VersionFormatError
from bios_updater.models.catalog import PackageCandidate
from bios_updater.models.context import RunContext
from bios_updater.models.decision import UpdateDecision
from bios_updater.models.status import DecisionEnum
from bios_updater.models.version import Ordering, compare_versions, parse_version

logger = logging.getLogger("bios_updater.decision")


def decide(
    context: RunContext,
    manifest_path: Optional[str],
    candidate: Optional[PackageCandidate],
) -> UpdateDecision:
    """Turn the resolution results into a terminal decision.

    Args:
        context: Run context with the resolved identity
        manifest_path: Catalog index result, None if the system is not listed
        candidate: Selected BIOS package, None if no package matched

    Returns:
        UpdateDecision in one of the four terminal states
    """
    identity = context.identity
    common = {
        "system_id": identity.system_id,
        "model": identity.model,
        "installed_version": identity.installed_version_raw,
        "manifest_path": manifest_path,
    }

    if manifest_path is None:
        decision = UpdateDecision(
            outcome=DecisionEnum.UNSUPPORTED,
            message=(
                f"System {identity.system_id} ({identity.model}) is not in the vendor catalog"
            ),
            **common,
        )
        logger.info(decision.message)
        return decision

    if candidate is None:
        decision = UpdateDecision(
            outcome=DecisionEnum.INDETERMINATE,
            reason=NoCandidatePackageError.code,
            message=f"No BIOS package found for {identity.model}",
            **common,
        )
        logger.warning(decision.message)
        return decision

    installed = parse_version(identity.installed_version_raw)
    available = parse_version(candidate.version_raw)
    try:
        ordering = compare_versions(installed, available)
    except VersionFormatError as e:
        decision = UpdateDecision(
            outcome=DecisionEnum.INDETERMINATE,
            candidate_version=candidate.version_raw,
            package=candidate,
            reason=e.code,
            message=f"Cannot determine BIOS freshness: {e.message}",
            **common,
        )
        logger.warning(decision.message)
        return decision

    if ordering == Ordering.LESS:
        decision = UpdateDecision(
            outcome=DecisionEnum.UPDATE_AVAILABLE,
            candidate_version=candidate.version_raw,
            package=candidate,
            message=(
                f"BIOS update available: "
                f"{identity.installed_version_raw} -> {candidate.version_raw}"
            ),
            **common,
        )
    else:
        decision = UpdateDecision(
            outcome=DecisionEnum.UP_TO_DATE,
            candidate_version=candidate.version_raw,
            package=candidate,
            message=(
                f"BIOS is up to date: installed {identity.installed_version_raw}, "
                f"latest {candidate.version_raw}"
            ),
            **common,
        )

    logger.info(decision.message)
    return decision
