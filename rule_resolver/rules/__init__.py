from rule_resolver.rules.models import RuleDocument

__all__ = ["RuleDocument"]
