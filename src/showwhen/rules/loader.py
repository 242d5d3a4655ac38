"""Load show-when rules from YAML files."""

import logging
from pathlib import Path
from typing import Any, Mapping

import yaml

from showwhen.rules.types import RuleFileError, ShowWhenRule, SyntaxIssue

logger = logging.getLogger(__name__)

RULE_FILE_PATTERNS = ("*.yaml", "*.yml")


class RuleSetLoader:
    """Loads rules from a single YAML file or a directory of YAML files.

    Each file holds a top-level ``rules`` list:

        rules:
          - name: button-label
            showWhen:
              - "element.tag === 'button'"
    """

    def __init__(self, rules_path: Path):
        self.rules_path = rules_path
        self.rules: dict[str, ShowWhenRule] = {}

    def load_all(self) -> None:
        """Load every rule file under the configured path."""
        if not self.rules_path.exists():
            logger.warning("Rules path %s does not exist", self.rules_path)
            return

        if self.rules_path.is_file():
            self.load_file(self.rules_path)
            return

        files = sorted(
            path
            for pattern in RULE_FILE_PATTERNS
            for path in self.rules_path.glob(pattern)
        )
        for yaml_file in files:
            self.load_file(yaml_file)

    def load_file(self, yaml_file: Path) -> None:
        """Load the rules of one YAML file."""
        try:
            with open(yaml_file) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise RuleFileError(f"{yaml_file}: invalid YAML: {e}") from e

        if not data:
            logger.warning("Rule file %s is empty, skipping", yaml_file)
            return

        if not isinstance(data, dict) or not isinstance(data.get("rules"), list):
            raise RuleFileError(f"{yaml_file}: expected a top-level 'rules' list")

        for item in data["rules"]:
            rule = ShowWhenRule.from_dict(item, source=yaml_file)
            if rule.name in self.rules:
                raise RuleFileError(f"{yaml_file}: duplicate rule name '{rule.name}'")
            self.rules[rule.name] = rule

    def get_rule(self, name: str) -> ShowWhenRule | None:
        """Get a rule by name."""
        return self.rules.get(name)

    def list_rules(self) -> list[ShowWhenRule]:
        """List all loaded rules in load order."""
        return list(self.rules.values())

    def check_syntax(self) -> list[SyntaxIssue]:
        """Collect syntax issues across all loaded rules."""
        return [issue for rule in self.rules.values() for issue in rule.syntax_issues()]

    def shown_rules(self, context: Mapping[str, Any]) -> list[ShowWhenRule]:
        """Rules whose show-when conditions hold for the context."""
        return [rule for rule in self.rules.values() if rule.is_shown(context)]
