from rule_resolver.matching.glob import (
    compile_pattern,
    find_matching_pattern,
    matches,
    normalize_path,
    validate_pattern,
)

__all__ = [
    "compile_pattern",
    "find_matching_pattern",
    "matches",
    "normalize_path",
    "validate_pattern",
]
