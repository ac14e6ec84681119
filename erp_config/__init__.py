"""
erp_config -- single public entrypoint for finance engine policy.

Responsibility:
    Provides the one way to obtain policy at runtime:
    ``get_active_policy()``.  Services receive the returned
    ``FinancePolicy`` and hand each engine its own section; engines never
    read configuration themselves.

Architecture position:
    Configuration -- YAML-driven policy, validated at load time.  Sits
    above ``erp_kernel`` and ``erp_engines`` (whose policy types it
    loads) and below ``erp_services``.

Invariants enforced:
    - Single entrypoint: runtime policy flows through ``get_active_policy()``.
    - Deterministic: the same YAML always yields the same checksum.

Failure modes:
    - ``FileNotFoundError`` -- the override file does not exist.
    - ``PolicyConfigError`` -- unknown key, wrong type or invalid value.

Audit relevance:
    Every successful call emits an ``ERP_POLICY_TRACE`` log record with
    the policy id, version, checksum and source path, tying every report
    to the policy that produced it.
"""

from __future__ import annotations

import logging
from pathlib import Path

from erp_config.loader import DEFAULTS_PATH, PolicyConfigError, load_policy
from erp_config.schema import FinancePolicy

_logger = logging.getLogger("erp_finance.config")


def get_active_policy(path: Path | str | None = None) -> FinancePolicy:
    """Load the active policy.

    Args:
        path: Optional YAML file overriding the packaged defaults.  Only
            the keys it names are changed.

    Returns:
        A frozen ``FinancePolicy`` carrying the checksum of its source.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        PolicyConfigError: If the merged policy is invalid.
    """
    policy = load_policy(Path(path) if path is not None else None)

    _logger.info(
        "ERP_POLICY_TRACE",
        extra={
            "trace_type": "ERP_POLICY_TRACE",
            "policy_id": policy.policy_id,
            "policy_version": policy.version,
            "checksum": policy.checksum,
            "source_path": str(path) if path is not None else str(DEFAULTS_PATH),
        },
    )
    return policy


__all__ = [
    "FinancePolicy",
    "PolicyConfigError",
    "get_active_policy",
]
