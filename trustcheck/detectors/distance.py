def levenshtein(a: str, b: str) -> int:
    """
    Minimum number of single-character insertions, deletions and
    substitutions turning a into b.

    Full (len(b)+1) x (len(a)+1) table, raw code points, no normalization.
    """
    if a == b:
        return 0

    dp = [[0] * (len(a) + 1) for _ in range(len(b) + 1)]

    for i in range(len(a) + 1):
        dp[0][i] = i

    for j in range(len(b) + 1):
        dp[j][0] = j

    for j in range(1, len(b) + 1):
        for i in range(1, len(a) + 1):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            dp[j][i] = min(
                dp[j][i - 1] + 1,         # insertion
                dp[j - 1][i] + 1,         # deletion
                dp[j - 1][i - 1] + cost,  # substitution
            )

    return dp[len(b)][len(a)]


def similarity(a: str, b: str, distance: int = None) -> float:
    """Percentage of the longer string left untouched by the edit path."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 100.0
    if distance is None:
        distance = levenshtein(a, b)
    return (longest - distance) / longest * 100
