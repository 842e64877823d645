"""Fuzzy subsequence matching and scoring for type-ahead filtering."""

import logging

logger = logging.getLogger(__name__)

SEQUENTIAL_BONUS = 30  # match directly follows the previous match
SEPARATOR_BONUS = 30  # match follows "_" or a space
CAMEL_BONUS = 30  # uppercase match following a lowercase letter
FIRST_LETTER_BONUS = 15  # match on the first character of the target

LEADING_LETTER_PENALTY = -15  # per character before the first match
MAX_LEADING_LETTER_PENALTY = -200
UNMATCHED_LETTER_PENALTY = -5  # per target character left unmatched

RECURSION_LIMIT = 5
MAX_MATCHES = 256

SEPARATORS = ("_", " ")


def is_subsequence(pattern: str, target: str) -> bool:
    """Check if pattern chars appear in target in order, ignoring case.

    Empty pattern or target never match.
    """
    if not pattern or not target:
        return False
    # Lowercase per character: whole-string lower() is context sensitive (final sigma)
    it = (char.lower() for char in target)
    return all(char.lower() in it for char in pattern)


def score_positions(target: str, positions: list[int]) -> int:
    """Score a complete alignment of pattern characters onto target."""
    score = 100

    penalty = LEADING_LETTER_PENALTY * positions[0]
    score += max(penalty, MAX_LEADING_LETTER_PENALTY)

    unmatched = len(target) - len(positions)
    score += UNMATCHED_LETTER_PENALTY * unmatched

    for i, idx in enumerate(positions):
        if i > 0 and idx == positions[i - 1] + 1:
            score += SEQUENTIAL_BONUS

        if idx > 0:
            neighbor = target[idx - 1]
            current = target[idx]
            if neighbor != neighbor.upper() and current != current.lower():
                score += CAMEL_BONUS
            if neighbor in SEPARATORS:
                score += SEPARATOR_BONUS
        else:
            score += FIRST_LETTER_BONUS

    return score


def _match(
    pattern: str,
    target: str,
    pattern_idx: int,
    target_idx: int,
    prefix: list[int],
    depth: int,
) -> tuple[bool, int, list[int]]:
    """Match pattern[pattern_idx:] in target[target_idx:] after prefix.

    Each accepted character also spawns a branch that looks for a later
    occurrence of it; the best fully matched branch wins if it beats the
    greedy alignment.
    """
    if depth >= RECURSION_LIMIT:
        logger.debug("Recursion limit reached matching %r in %r", pattern, target)
        return False, 0, []

    if pattern_idx == len(pattern) or target_idx == len(target):
        return False, 0, []

    positions = list(prefix)
    best: tuple[int, list[int]] | None = None

    while pattern_idx < len(pattern) and target_idx < len(target):
        if pattern[pattern_idx].lower() == target[target_idx].lower():
            if len(positions) >= MAX_MATCHES:
                logger.debug("Match cap reached matching %r", pattern)
                return False, 0, []

            matched, branch_score, branch_positions = _match(
                pattern,
                target,
                pattern_idx,
                target_idx + 1,
                positions,
                depth + 1,
            )
            if matched and (best is None or branch_score > best[0]):
                best = (branch_score, branch_positions)

            positions.append(target_idx)
            pattern_idx += 1
        target_idx += 1

    if pattern_idx < len(pattern):
        return False, 0, []

    score = score_positions(target, positions)

    if best is not None and best[0] > score:
        return True, best[0], best[1]
    return True, score, positions


def fuzzy_match_positions(pattern: str, target: str) -> tuple[bool, int, list[int]]:
    """
    Fuzzy match pattern against target.

    Returns (matched, score, positions) where positions are the target
    indices of the best alignment found. Unmatched returns (False, 0, []).
    """
    if not pattern or not target:
        return False, 0, []
    return _match(pattern, target, 0, 0, [], 1)


def fuzzy_match(pattern: str, target: str) -> tuple[bool, int]:
    """Fuzzy match pattern against target, returning (matched, score)."""
    matched, score, _ = fuzzy_match_positions(pattern, target)
    return matched, score
