import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from stylewalker.findings import AnalysisResult, Finding, Severity


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuleOutcome:
    """Result of one rule invocation on one node: findings or an error."""

    findings: tuple = ()
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Analyzer:
    """
    Applies a RuleSet to a syntax tree and collects findings.

    Nodes are visited in pre-order; for every node each applicable rule
    receives the node and its ancestors (innermost first). A rule that
    raises is reported as an error finding for that node and the run
    continues.
    """

    def _invoke(self, rule, node, ancestors):
        try:
            findings = tuple(rule.evaluate(node, ancestors) or ())
            for item in findings:
                if not isinstance(item, Finding):
                    raise TypeError(f"evaluate() returned {type(item).__name__}, expected Finding")
        except Exception as exc:
            return RuleOutcome(error=exc)
        return RuleOutcome(findings=findings)

    def _failure_finding(self, rule, node, error):
        return Finding(
            rule_id=rule.id,
            message=f"Rule failed on {node.kind.value}: {type(error).__name__}: {error}",
            location=node.location,
            severity=Severity.ERROR,
        )

    def analyze(self, root, rule_set):
        findings = []
        visited = 0
        failures = 0

        for node, ancestors in root.iter_preorder():
            visited += 1
            for rule in rule_set.rules_for(node.kind):
                outcome = self._invoke(rule, node, ancestors)
                if outcome.ok:
                    findings.extend(outcome.findings)
                    continue

                failures += 1
                logger.warning(
                    "Rule %s failed on %s at %s: %s",
                    rule.id,
                    node.kind.value,
                    node.location,
                    outcome.error,
                )
                logger.debug("Rule failure details", exc_info=outcome.error)
                findings.append(self._failure_finding(rule, node, outcome.error))

        logger.debug(
            "Analyzed %d nodes with %d rules: %d findings, %d rule failures",
            visited,
            len(rule_set),
            len(findings),
            failures,
        )
        return AnalysisResult.from_findings(findings)


def analyze(root, rule_set):
    return Analyzer().analyze(root, rule_set)


def analyze_many(roots, rule_set, max_workers=None) -> list:
    """
    Analyze independent trees concurrently; results keep the input order.
    """
    roots = list(roots)
    if not roots:
        return []

    analyzer = Analyzer()
    if max_workers == 1 or len(roots) == 1:
        return [analyzer.analyze(root, rule_set) for root in roots]

    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="stylewalker") as executor:
        return list(executor.map(lambda root: analyzer.analyze(root, rule_set), roots))
