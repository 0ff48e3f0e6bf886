"""Configuration loading and management for Suite Insight.

This module provides configuration discovery and validation. Configuration
sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Project config (./suite-insight.toml)
    3. Explicit config file (--config)
    4. Environment variables (SUITE_INSIGHT_* prefix)
    5. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(test_dir="test/e2e", verbose=True)
    >>> config.verbosity
    'verbose'
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]

# (pattern, id_pattern) pairs. The id pattern's first group is the record id.
RulePair = tuple[str, str]

DEFAULT_REQUIREMENT_RULES: tuple[RulePair, ...] = (
    (r"^\d+\.\s+WHEN.*?THE.*?SHALL.*?$", r"^(\d+(?:\.\d+)?)"),
)
DEFAULT_PROPERTY_RULES: tuple[RulePair, ...] = (
    (r"Property \d+:.*?\n\*For any\*.*?\n\*\*Validates:.*?\*\*", r"Property (\d+):"),
)


@dataclass(frozen=True)
class ThresholdConfig:
    """Fixed decision thresholds for coverage and health aggregation.

    Attributes:
        Coverage:
            coverage_target_percent: Overall coverage below this asks for more tests
            min_test_files: Fewer discovered test files triggers the organizational hint

        Health verdict:
            unhealthy_fraction: Share of unhealthy components that makes the suite unhealthy
            degraded_fraction: Share of degraded components that makes the suite degraded
            major_issue_limit: Number of major issues that makes the suite degraded

        Quality metrics:
            metric_target: Quality metric below this produces a recommendation

        Probes:
            min_helper_bytes: Helper files smaller than this are considered stubs
            min_allocatable_cpu_millis: Cluster CPU needed for a comfortable run
            min_allocatable_memory_bytes: Cluster memory needed for a comfortable run
    """

    coverage_target_percent: float = 80.0
    min_test_files: int = 8

    unhealthy_fraction: float = 0.5
    degraded_fraction: float = 0.5
    major_issue_limit: int = 2

    metric_target: float = 0.8

    min_helper_bytes: int = 100
    min_allocatable_cpu_millis: int = 2000
    min_allocatable_memory_bytes: int = 4_000_000_000

    def __post_init__(self) -> None:
        """Validate threshold configuration."""
        if not 0.0 <= self.coverage_target_percent <= 100.0:
            raise ValueError("coverage_target_percent must be between 0.0 and 100.0")

        for field_name in ("unhealthy_fraction", "degraded_fraction", "metric_target"):
            value = getattr(self, field_name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{field_name} must be between 0.0 and 1.0")

        if self.min_test_files < 0:
            raise ValueError("min_test_files must be non-negative")
        if self.major_issue_limit < 1:
            raise ValueError("major_issue_limit must be at least 1")
        if self.min_helper_bytes < 0:
            raise ValueError("min_helper_bytes must be non-negative")


DEFAULT_THRESHOLDS = ThresholdConfig()


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for one analysis run.

    Paths are resolved relative to the working directory. Helper and
    structure file lists are relative to ``test_dir``.
    """

    # Inputs
    requirements_file: str = "requirements.md"
    design_file: str = "design.md"
    test_dir: str = "test/e2e"
    test_suffix: str = "_test.go"
    test_entry_prefix: str = "Test"

    # Extraction rules
    requirement_rules: tuple[RulePair, ...] = DEFAULT_REQUIREMENT_RULES
    property_rules: tuple[RulePair, ...] = DEFAULT_PROPERTY_RULES

    # Test structure
    required_files: list[str] = field(
        default_factory=lambda: [
            "e2e_suite_test.go",
            "e2e_test.go",
            "helpers/policy_helpers.go",
            "helpers/workload_helpers.go",
            "helpers/validation_helpers.go",
            "helpers/cleanup_helpers.go",
            "fixtures/generators.go",
        ]
    )
    doc_files: list[str] = field(
        default_factory=lambda: [
            "README.md",
            "TESTING_GUIDE.md",
            "TROUBLESHOOTING.md",
            "DEVELOPER_ONBOARDING.md",
        ]
    )
    helper_files: dict[str, str] = field(
        default_factory=lambda: {
            "policy-helpers": "helpers/policy_helpers.go",
            "workload-helpers": "helpers/workload_helpers.go",
            "validation-helpers": "helpers/validation_helpers.go",
            "cleanup-helpers": "helpers/cleanup_helpers.go",
        }
    )
    helpers_dir: str = "helpers"
    parallel_config_file: str = "parallel_config.go"

    # Cluster
    cluster_probes: bool = True
    kubeconfig: Optional[str] = None
    kube_context: Optional[str] = None
    required_components: dict[str, str] = field(
        default_factory=lambda: {
            "cert-manager": "cert-manager",
            "metrics-server": "kube-system",
        }
    )
    required_namespaces: list[str] = field(default_factory=lambda: ["optipod-system"])
    optional_namespaces: list[str] = field(default_factory=list)
    required_crds: list[str] = field(default_factory=lambda: ["optimizationpolicies.optipod.io"])
    optional_crds: list[str] = field(default_factory=list)

    # Execution
    workers: Optional[int] = None
    probe_timeout_seconds: float = 30.0

    # Output control
    verbosity: Verbosity = "normal"

    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.test_suffix:
            raise InvalidConfigError("test_suffix", self.test_suffix, "must not be empty")
        if self.workers is not None and self.workers < 1:
            raise InvalidConfigError("workers", self.workers, "must be at least 1")
        if self.probe_timeout_seconds <= 0:
            raise InvalidConfigError(
                "probe_timeout_seconds", self.probe_timeout_seconds, "must be positive"
            )
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError("verbosity", self.verbosity, "expected quiet/normal/verbose")
        if not self.requirement_rules:
            raise InvalidConfigError("requirement_rules", self.requirement_rules, "must not be empty")
        if not self.property_rules:
            raise InvalidConfigError("property_rules", self.property_rules, "must not be empty")

    @property
    def test_path(self) -> Path:
        return Path(self.test_dir)


def load_config(config_file: Optional[Path] = None, **overrides) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options do not mask file values.

    Returns:
        Validated AnalysisConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing
    """
    merged: dict = {}

    project_config = Path.cwd() / "suite-insight.toml"
    if project_config.exists():
        merged.update(_load_toml_section(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_toml_section(config_file))

    merged.update(_load_env_vars())

    if overrides.pop("verbose", False):
        overrides["verbosity"] = "verbose"
    if overrides.pop("quiet", False):
        overrides["verbosity"] = "quiet"
    merged.update({k: v for k, v in overrides.items() if v is not None})

    thresholds = merged.pop("thresholds", None)
    if isinstance(thresholds, dict):
        try:
            merged["thresholds"] = ThresholdConfig(**thresholds)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid [thresholds] config: {e}")
    elif isinstance(thresholds, ThresholdConfig):
        merged["thresholds"] = thresholds

    mining = merged.pop("mining", None)
    if isinstance(mining, dict):
        merged.update(_rules_from_mining_table(mining))

    try:
        return AnalysisConfig(**merged)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _rules_from_mining_table(mining: dict) -> dict[str, tuple[RulePair, ...]]:
    """Translate the ``[mining]`` TOML table into rule tuples.

    Expected shape::

        [[mining.requirements]]
        pattern = '^REQ-\\d+ .*$'
        id_pattern = '^REQ-(\\d+)'
    """
    result: dict[str, tuple[RulePair, ...]] = {}
    for kind, key in (("requirements", "requirement_rules"), ("properties", "property_rules")):
        entries = mining.get(kind)
        if entries is None:
            continue
        try:
            result[key] = tuple((entry["pattern"], entry["id_pattern"]) for entry in entries)
        except (KeyError, TypeError) as e:
            raise ConfigurationError(f"Invalid [mining.{kind}] rule: {e}")
    return result


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from SUITE_INSIGHT_* environment variables.

    Only scalar fields are read (str, int, float, bool and their Optional
    forms); list and mapping fields must come from a TOML file.
    """
    type_hints = get_type_hints(AnalysisConfig)
    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"SUITE_INSIGHT_{field_name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise ConfigurationError(f"Invalid {env_key}: {e}")
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type."""
    origin = getattr(type_hint, "__origin__", None)

    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if origin in (list, dict, tuple) or type_hint in (list, dict, tuple):
        return None

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        if lower in ("false", "0", "no", "off"):
            return False
        raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_section(path: Path) -> dict:
    """Load a TOML file, preferring a ``[tool.suite-insight]`` table if present."""
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}")

    tool_section = data.get("tool", {}).get("suite-insight")
    if isinstance(tool_section, dict):
        return dict(tool_section)
    return data
