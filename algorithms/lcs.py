"""
lcs.py - Longest Common Subsequence
===================================
Bottom-up DP table fill followed by a backtrack from dp[m][n] that reads
off one longest common subsequence.  On a tie the backtrack moves left.
"""

from typing import Dict, Generator, List, Tuple

from algorithms.step import Snapshot, SnapshotBuilder


PSEUDOCODE: List[str] = [
    "dp ← (m+1)×(n+1) zeros",                              # 0
    "for i in 1..m, j in 1..n:",                           # 1
    "    if a[i-1] == b[j-1]: dp[i][j] ← dp[i-1][j-1] + 1", # 2
    "    else: dp[i][j] ← max(dp[i-1][j], dp[i][j-1])",    # 3
    "backtrack from (m, n):",                              # 4
    "    match → take char, go diagonal",                  # 5
    "    else → move towards the larger neighbour",        # 6
]

DEFAULT_STR1 = "AGGTAB"
DEFAULT_STR2 = "GXTXAYB"


def lcs_indices(a: str, b: str, dp: List[List[int]]) -> Tuple[List[int], List[int]]:
    i, j = len(a), len(b)
    idx1: List[int] = []
    idx2: List[int] = []
    while i > 0 and j > 0:
        if a[i - 1] == b[j - 1]:
            idx1.insert(0, i - 1)
            idx2.insert(0, j - 1)
            i -= 1
            j -= 1
        elif dp[i - 1][j] > dp[i][j - 1]:
            i -= 1
        else:
            j -= 1
    return idx1, idx2


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def lcs(str1: str = DEFAULT_STR1, str2: str = DEFAULT_STR2) -> Generator[Snapshot, None, None]:
    a, b = str1, str2
    m, n = len(a), len(b)
    dp = [[0] * (n + 1) for _ in range(m + 1)]
    sb = SnapshotBuilder()

    def snap(description, line, final=False, **extra):
        return sb.build(description, line=line, final=final, str1=a, str2=b, dp=dp, **extra)

    yield snap("Initializing DP table with zeros", 0, i=0, j=0, phase="init")

    for i in range(1, m + 1):
        for j in range(1, n + 1):
            yield snap(f"Comparing '{a[i - 1]}' with '{b[j - 1]}'", 1, i=i, j=j,
                       phase="fill", comparing=True, char1=a[i - 1], char2=b[j - 1])
            if a[i - 1] == b[j - 1]:
                dp[i][j] = dp[i - 1][j - 1] + 1
                yield snap(f"Match! dp[{i}][{j}] = dp[{i - 1}][{j - 1}] + 1 = {dp[i][j]}", 2,
                           i=i, j=j, phase="fill", match=True, diagonal=True)
            else:
                dp[i][j] = max(dp[i - 1][j], dp[i][j - 1])
                yield snap(
                    f"No match. dp[{i}][{j}] = max({dp[i - 1][j]}, {dp[i][j - 1]}) = {dp[i][j]}", 3,
                    i=i, j=j, phase="fill", match=False,
                    from_above=dp[i - 1][j] >= dp[i][j - 1],
                )

    i, j = m, n
    found = ""
    while i > 0 and j > 0:
        if a[i - 1] == b[j - 1]:
            found = a[i - 1] + found
            yield snap(f"Backtrack: '{a[i - 1]}' is in LCS", 5, i=i, j=j, phase="backtrack",
                       match=True, current_lcs=found)
            i -= 1
            j -= 1
        elif dp[i - 1][j] > dp[i][j - 1]:
            yield snap("Backtrack: Moving up", 6, i=i, j=j, phase="backtrack",
                       direction="up", current_lcs=found)
            i -= 1
        else:
            yield snap("Backtrack: Moving left", 6, i=i, j=j, phase="backtrack",
                       direction="left", current_lcs=found)
            j -= 1

    idx1, idx2 = lcs_indices(a, b, dp)
    indices: Dict[str, List[int]] = {"indices1": idx1, "indices2": idx2}
    yield snap(f'LCS length: {dp[m][n]}, LCS: "{found}"', 4, final=True, phase="done",
               lcs=found, length=dp[m][n], lcs_indices=indices, complete=True)
