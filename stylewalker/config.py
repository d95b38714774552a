import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from stylewalker.errors import ConfigError
from stylewalker.findings import Severity
from stylewalker.syntax import NodeKind


logger = logging.getLogger(__name__)

RULE_GROUPS = {
    "structure": ("MaxNestingDepth", "GuardClausePreferred", "MaxParameters"),
    "declarations": ("NoVarDeclaration",),
    "naming": ("NamingConvention",),
    "loops": ("EmptyLoopBody",),
}

ALL_RULE_GROUPS = frozenset(RULE_GROUPS)
KNOWN_RULE_IDS = frozenset(rule_id for ids in RULE_GROUPS.values() for rule_id in ids)

_LIMITED_RULES = {"MaxNestingDepth", "MaxParameters"}
_OPTION_KEYS = {"enabled", "severity", "limit", "patterns"}


@dataclass(frozen=True)
class StyleConfig:
    groups: frozenset = ALL_RULE_GROUPS
    rules: MappingProxyType = field(default_factory=lambda: MappingProxyType({}))

    def options(self, rule_id) -> dict:
        return dict(self.rules.get(rule_id, {}))

    def is_enabled(self, rule_id) -> bool:
        return bool(self.rules.get(rule_id, {}).get("enabled", True))


def parse_groups(raw) -> frozenset:
    if isinstance(raw, str):
        raw = raw.split(",")
    if not isinstance(raw, (list, tuple, set, frozenset)):
        raise ConfigError("'groups' must be a list of group names")

    groups = {str(item).strip().lower() for item in raw if str(item).strip()}
    unknown = sorted(groups - ALL_RULE_GROUPS)
    if unknown:
        raise ConfigError(
            "Unknown rule group(s): "
            + ", ".join(unknown)
            + ". Valid groups: "
            + ", ".join(sorted(ALL_RULE_GROUPS))
            + "."
        )
    return frozenset(groups)


def _parse_patterns(rule_id, raw):
    if not isinstance(raw, dict):
        raise ConfigError(f"{rule_id}.patterns must be an object mapping node kinds to regexes")

    patterns = {}
    for kind_name, source in raw.items():
        try:
            kind = NodeKind(kind_name)
        except ValueError:
            raise ConfigError(f"{rule_id}.patterns: unknown node kind '{kind_name}'") from None
        if source is None:
            patterns[kind] = None
            continue
        try:
            re.compile(str(source))
        except re.error as exc:
            raise ConfigError(f"{rule_id}.patterns.{kind_name}: invalid regex: {exc}") from exc
        patterns[kind] = str(source)
    return patterns


def _parse_rule_options(rule_id, raw) -> dict:
    if rule_id not in KNOWN_RULE_IDS:
        raise ConfigError(f"Unknown rule: {rule_id}")
    if not isinstance(raw, dict):
        raise ConfigError(f"Options for {rule_id} must be an object")

    unknown = sorted(set(raw) - _OPTION_KEYS)
    if unknown:
        raise ConfigError(f"Unknown option(s) for {rule_id}: {', '.join(unknown)}")

    options = {}
    if "enabled" in raw:
        if not isinstance(raw["enabled"], bool):
            raise ConfigError(f"{rule_id}.enabled must be true or false")
        options["enabled"] = raw["enabled"]

    if "severity" in raw:
        try:
            options["severity"] = Severity.parse(raw["severity"])
        except ValueError as exc:
            raise ConfigError(f"{rule_id}.severity: {exc}") from exc

    if "limit" in raw:
        if rule_id not in _LIMITED_RULES:
            raise ConfigError(f"{rule_id} does not take a limit")
        limit = raw["limit"]
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
            raise ConfigError(f"{rule_id}.limit must be a non-negative integer")
        options["limit"] = limit

    if "patterns" in raw:
        if rule_id != "NamingConvention":
            raise ConfigError(f"{rule_id} does not take patterns")
        options["patterns"] = _parse_patterns(rule_id, raw["patterns"])

    return options


def config_from_dict(raw) -> StyleConfig:
    if not isinstance(raw, dict):
        raise ConfigError("Configuration must be a JSON object")

    unknown = sorted(set(raw) - {"groups", "rules"})
    if unknown:
        raise ConfigError(f"Unknown configuration key(s): {', '.join(unknown)}")

    groups = parse_groups(raw["groups"]) if "groups" in raw else ALL_RULE_GROUPS

    rules_raw = raw.get("rules", {})
    if not isinstance(rules_raw, dict):
        raise ConfigError("'rules' must be an object keyed by rule id")
    rules = {rule_id: _parse_rule_options(rule_id, options) for rule_id, options in rules_raw.items()}

    return StyleConfig(groups=groups, rules=MappingProxyType(rules))


def load_config(path=None) -> StyleConfig:
    if path is None:
        return StyleConfig()

    config_path = Path(path)
    if not config_path.is_file():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        text = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Could not read config file {config_path}: {exc}") from exc

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Config file is not valid JSON: {config_path}: {exc}") from exc

    config = config_from_dict(raw)
    logger.debug("Loaded config from %s: groups=%s", config_path, sorted(config.groups))
    return config
