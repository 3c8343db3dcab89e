"""Configuration validator utilities for skillcheck.

Provides functions to validate configuration dictionaries and load the
corpus configuration file, ensuring that all settings are usable.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Tuple

from pydantic import ValidationError

from skillcheck.errors import ConfigError
from skillcheck.lint.rules import RULES, Severity

from .schema import Config

logger = logging.getLogger(__name__)

CONFIG_FILE = ".skillcheck.json"


class ConfigValidator:
    """Utility class for validating skillcheck configurations."""

    @staticmethod
    def validate_config(config_dict: Dict) -> Tuple[bool, List[str]]:
        """Validate a configuration dictionary against the schema.

        Args:
            config_dict: Configuration dictionary to validate

        Returns:
            Tuple of (is_valid, error_messages)
        """
        errors: List[str] = []

        try:
            Config(**config_dict)
            return True, []
        except ValidationError as e:
            for error in e.errors():
                field = '.'.join(str(x) for x in error['loc'])
                msg = error['msg']
                errors.append(f"{field}: {msg}")
            return False, errors

    @staticmethod
    def validate_rules_config(rules_config: Dict) -> Tuple[bool, List[str]]:
        """Validate rule ids, severities and thresholds.

        Args:
            rules_config: The "rules" section of the configuration

        Returns:
            Tuple of (is_valid, errors)
        """
        issues: List[str] = []

        for rule_id in rules_config.get("disabled_rules", []):
            if rule_id not in RULES:
                issues.append(f"rules.disabled_rules: unknown rule '{rule_id}'")

        valid_severities = [s.value for s in Severity]
        for rule_id, severity in rules_config.get("severity_overrides", {}).items():
            if rule_id not in RULES:
                issues.append(f"rules.severity_overrides: unknown rule '{rule_id}'")
            if severity not in valid_severities:
                issues.append(
                    f"rules.severity_overrides.{rule_id}: '{severity}' is not one of {', '.join(valid_severities)}"
                )

        threshold = rules_config.get("toc_line_threshold", 100)
        if isinstance(threshold, int) and threshold < 1:
            issues.append("rules.toc_line_threshold: must be at least 1")

        max_length = rules_config.get("max_description_length", 1024)
        if isinstance(max_length, int) and max_length < 1:
            issues.append("rules.max_description_length: must be at least 1")

        if "toc_headings" in rules_config and not rules_config["toc_headings"]:
            issues.append("rules.toc_headings: at least one heading is required")

        return not issues, issues

    @staticmethod
    def validate_layout_config(layout_config: Dict) -> Tuple[bool, List[str]]:
        """Layout paths must stay inside the corpus root."""
        issues: List[str] = []
        for key, value in layout_config.items():
            if key == "readme_section" or not isinstance(value, str):
                continue
            path = Path(value)
            if path.is_absolute() or ".." in path.parts:
                issues.append(f"layout.{key}: '{value}' must be a path relative to the corpus root")
            if not value.strip():
                issues.append(f"layout.{key}: must not be empty")
        return not issues, issues

    @staticmethod
    def test_configuration(config_dict: Dict) -> Dict[str, any]:
        """Run every configuration check.

        Args:
            config_dict: Configuration to test

        Returns:
            Dictionary with test results
        """
        results = {
            "overall_valid": True,
            "tests": {}
        }

        checks = {
            "schema_validation": ConfigValidator.validate_config(config_dict),
            "rules_validation": ConfigValidator.validate_rules_config(config_dict.get("rules", {}) or {}),
            "layout_validation": ConfigValidator.validate_layout_config(config_dict.get("layout", {}) or {}),
        }
        for name, (is_valid, errors) in checks.items():
            results["tests"][name] = {"valid": is_valid, "errors": errors}
            if not is_valid:
                results["overall_valid"] = False

        return results


def load_config(root: Path, path: Path | None = None) -> Config:
    """Load the corpus configuration, falling back to defaults.

    Args:
        root: Corpus root directory
        path: Explicit config file; defaults to {root}/.skillcheck.json

    Raises:
        ConfigError: If the file is unreadable or fails validation
    """
    config_path = Path(path) if path else Path(root) / CONFIG_FILE
    if not config_path.exists():
        if path:
            raise ConfigError(f"Config file not found: {config_path}")
        logger.debug(f"No {CONFIG_FILE} in {root}; using defaults")
        return Config()

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path}: expected a JSON object")

    results = ConfigValidator.test_configuration(data)
    if not results["overall_valid"]:
        errors = [e for test in results["tests"].values() for e in test["errors"]]
        raise ConfigError(f"{config_path}:\n  " + "\n  ".join(errors))

    logger.debug(f"Loaded configuration from {config_path}")
    return Config(**data)
