"""
Policy Loader (``erp_config.loader``).

Responsibility
--------------
Loads YAML policy files and parses them into the typed
``erp_config.schema`` dataclasses.  The single public entry point for
runtime policy is ``erp_config.get_active_policy()``.

Invariants enforced
-------------------
* Decimal-exact: numbers are converted through ``str`` so a YAML float
  such as ``0.01`` becomes ``Decimal("0.01")``, never a binary float.
* Unknown keys are rejected, so a misspelt override can never be
  silently ignored.
* Partial files: an override file is deep-merged over the packaged
  defaults; mappings merge key by key, lists replace.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the merged
  policy data.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Unknown key, wrong type or out-of-range value -> ``PolicyConfigError``
  naming the offending key.
"""

from __future__ import annotations

import dataclasses
import hashlib
import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from erp_config.schema import (
    CashFlowPolicy,
    CollectionActionType,
    CollectionPolicy,
    CollectionPriority,
    CollectionRule,
    CostingPolicy,
    CreditPolicy,
    DashboardPolicy,
    ExpenseBasis,
    FinancePolicy,
    OperatingExpenseRule,
    ProfitLossPolicy,
    ReconciliationPolicy,
    TaxPolicy,
)

DEFAULTS_PATH = Path(__file__).parent / "defaults.yaml"

# Section name -> policy type
_SECTIONS: dict[str, type] = {
    "tax": TaxPolicy,
    "costing": CostingPolicy,
    "profit_loss": ProfitLossPolicy,
    "cash_flow": CashFlowPolicy,
    "credit": CreditPolicy,
    "reconciliation": ReconciliationPolicy,
    "collection": CollectionPolicy,
    "dashboard": DashboardPolicy,
}

# YAML list keys that map onto tuple fields with a different name
_LIST_FIELDS = {
    ("profit_loss", "operating_expenses"): "operating_expense_rules",
    ("collection", "rules"): "rules",
}


class PolicyConfigError(ValueError):
    """Policy file content is invalid."""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Invalid policy value at {key!r}: {reason}")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        PolicyConfigError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise PolicyConfigError(str(path), "document must be a mapping")
    return data


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into a copy of ``base`` (mappings recurse)."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def parse_decimal(value: Any, key: str) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise PolicyConfigError(key, f"expected a number, got {value!r}")
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise PolicyConfigError(key, f"expected a number, got {value!r}") from None


def parse_int(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise PolicyConfigError(key, f"expected an integer, got {value!r}")
    return value


def _coerce(default: Any, value: Any, key: str) -> Any:
    """Convert ``value`` to the type of the field's default."""
    if isinstance(default, bool):
        if not isinstance(value, bool):
            raise PolicyConfigError(key, f"expected true/false, got {value!r}")
        return value
    if isinstance(default, Decimal):
        return parse_decimal(value, key)
    if isinstance(default, int):
        return parse_int(value, key)
    if isinstance(default, str):
        if not isinstance(value, str):
            raise PolicyConfigError(key, f"expected a string, got {value!r}")
        return value
    raise PolicyConfigError(key, "field is not configurable")


def parse_expense_rule(data: dict[str, Any], key: str) -> OperatingExpenseRule:
    try:
        basis = ExpenseBasis(str(data["basis"]).lower())
        return OperatingExpenseRule(
            name=data["name"],
            basis=basis,
            rate=parse_decimal(data["rate"], f"{key}.rate") if "rate" in data else None,
            amount=parse_decimal(data["amount"], f"{key}.amount") if "amount" in data else None,
        )
    except KeyError as e:
        raise PolicyConfigError(key, f"missing {e.args[0]!r}") from None
    except ValueError as e:
        if isinstance(e, PolicyConfigError):
            raise
        raise PolicyConfigError(key, str(e)) from None


def parse_collection_rule(data: dict[str, Any], key: str) -> CollectionRule:
    try:
        max_days = data["max_days"]
        return CollectionRule(
            max_days=None if max_days is None else parse_int(max_days, f"{key}.max_days"),
            action=CollectionActionType(str(data["action"]).upper()),
            priority=CollectionPriority(str(data["priority"]).upper()),
            reason=str(data["reason"]),
        )
    except KeyError as e:
        raise PolicyConfigError(key, f"missing {e.args[0]!r}") from None
    except ValueError as e:
        if isinstance(e, PolicyConfigError):
            raise
        raise PolicyConfigError(key, str(e)) from None


def parse_section(name: str, data: dict[str, Any]) -> Any:
    """Parse one policy section over its dataclass defaults."""
    policy_type = _SECTIONS[name]
    defaults = policy_type()
    field_names = {f.name for f in dataclasses.fields(policy_type)}
    if not isinstance(data, dict):
        raise PolicyConfigError(name, "section must be a mapping")

    values: dict[str, Any] = {}
    for raw_key, value in data.items():
        key = f"{name}.{raw_key}"
        list_field = _LIST_FIELDS.get((name, raw_key))
        if list_field is not None:
            if not isinstance(value, list):
                raise PolicyConfigError(key, "expected a list")
            parser = parse_expense_rule if name == "profit_loss" else parse_collection_rule
            values[list_field] = tuple(
                parser(item, f"{key}[{i}]") for i, item in enumerate(value)
            )
        elif raw_key in field_names:
            values[raw_key] = _coerce(getattr(defaults, raw_key), value, key)
        else:
            raise PolicyConfigError(key, "unknown key")

    try:
        return policy_type(**values)
    except ValueError as e:
        raise PolicyConfigError(name, str(e)) from None


def parse_policy(data: dict[str, Any]) -> FinancePolicy:
    """
    Parse a full policy document into a ``FinancePolicy``.

    Sections that are absent keep their dataclass defaults.
    """
    sections: dict[str, Any] = {}
    for key, value in data.items():
        if key in ("policy_id", "version"):
            continue
        if key not in _SECTIONS:
            raise PolicyConfigError(key, "unknown section")
        sections[key] = parse_section(key, value)

    return FinancePolicy(
        policy_id=str(data.get("policy_id", "default")),
        version=parse_int(data.get("version", 1), "version"),
        checksum=compute_checksum(data),
        **sections,
    )


def load_policy(path: Path | None = None) -> FinancePolicy:
    """
    Load the packaged defaults, optionally overridden by ``path``.

    Raises:
        FileNotFoundError, yaml.YAMLError, PolicyConfigError.
    """
    data = load_yaml_file(DEFAULTS_PATH)
    if path is not None:
        data = deep_merge(data, load_yaml_file(Path(path)))
    return parse_policy(data)
