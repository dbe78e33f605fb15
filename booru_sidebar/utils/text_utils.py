"""Fuzzy string similarity used to rank tags and titles against a search query."""


def _require_str(*values: object) -> None:
    for value in values:
        if not isinstance(value, str):
            raise TypeError(f"expected str, got {type(value).__name__}")


def levenshtein_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein edit distance between two strings."""
    _require_str(s1, s2)

    if len(s1) == 0:
        return len(s2)
    if len(s2) == 0:
        return len(s1)

    # Keep the rows as short as the shorter string
    if len(s2) > len(s1):
        s1, s2 = s2, s1

    previous_row = list(range(len(s2) + 1))
    current_row = [0] * (len(s2) + 1)

    for i in range(1, len(s1) + 1):
        current_row[0] = i
        c1 = s1[i - 1]
        for k in range(1, len(s2) + 1):
            cost = 0 if c1 == s2[k - 1] else 1
            current_row[k] = min(
                previous_row[k] + 1,
                current_row[k - 1] + 1,
                previous_row[k - 1] + cost,
            )
        previous_row, current_row = current_row, previous_row

    return previous_row[len(s2)]


def partial_ratio(short_s: str, long_s: str) -> float:
    """
    Best similarity of short_s against any same-length window of long_s.

    Returns 1.0 for an empty short_s. When long_s is shorter than short_s
    there is no window to compare and the result is 0.0.
    """
    _require_str(short_s, long_s)

    len_s = len(short_s)
    if len_s == 0:
        return 1.0

    best = 0.0
    for i in range(len(long_s) - len_s + 1):
        dist = levenshtein_distance(short_s, long_s[i:i + len_s])
        score = 1.0 - (dist / len_s)
        if score > best:
            best = score
            if best == 1.0:
                break

    return best


def _common_prefix_length(s1: str, s2: str) -> int:
    length = 0
    for c1, c2 in zip(s1, s2):
        if c1 != c2:
            break
        length += 1
    return length


def _blend(s1: str, s2: str, full_weight: float, part_weight: float) -> tuple[float, int]:
    """Weighted whole-string/partial similarity. Returns (score, max_len)."""
    dist = levenshtein_distance(s1, s2)
    max_len = max(len(s1), len(s2))

    full = 1.0 - (dist / max_len)
    if len(s1) < len(s2):
        part = partial_ratio(s1, s2)
    else:
        part = partial_ratio(s2, s1)

    return full_weight * full + part_weight * part, max_len


def _clamp(score: float) -> float:
    return max(0.0, min(1.0, score))


def compute_score(s1: str, s2: str) -> float:
    """
    General similarity for two comparably sized labels.

    Favours whole-string similarity (0.85 full / 0.15 partial), then applies
    a first-character penalty, a length-difference penalty, a common-prefix
    bonus and a containment bonus. Result is clamped to [0, 1].
    """
    _require_str(s1, s2)

    if s1 == s2:
        return 1.0
    if max(len(s1), len(s2)) == 0:
        return 1.0

    score, max_len = _blend(s1, s2, 0.85, 0.15)

    if s1 and s2 and s1[0] != s2[0]:
        score -= 0.05

    len_diff = abs(len(s1) - len(s2))
    if len_diff >= 3:
        score -= 0.05 * len_diff / max_len

    score += 0.02 * _common_prefix_length(s1, s2)

    if s2 in s1 or s1 in s2:
        score += 0.06

    return _clamp(score)


def compute_text_match_score(s1: str, s2: str) -> float:
    """
    Search-as-you-type similarity where substring hits dominate.

    Blend is 0.4 full / 0.6 partial, with a gentler length penalty, a small
    prefix bonus and a large containment bonus. Result is clamped to [0, 1].
    """
    _require_str(s1, s2)

    if s1 == s2:
        return 1.0
    if max(len(s1), len(s2)) == 0:
        return 1.0

    score, max_len = _blend(s1, s2, 0.4, 0.6)

    len_diff = abs(len(s1) - len(s2))
    if len_diff >= 10:
        score -= 0.02 * len_diff / max_len

    score += 0.01 * _common_prefix_length(s1, s2)

    if s2 in s1 or s1 in s2:
        score += 0.2

    return _clamp(score)
