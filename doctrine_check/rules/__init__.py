"""Rule catalog, predicates, and evaluation."""

from .catalog import RULE_EXPLANATIONS, RULE_ORDER, RuleCatalog, build_catalog
from .evaluator import evaluate

__all__ = ["RULE_EXPLANATIONS", "RULE_ORDER", "RuleCatalog", "build_catalog", "evaluate"]
