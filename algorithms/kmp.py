"""
kmp.py - Knuth–Morris–Pratt String Matching
===========================================
Two walk-throughs share this module:

  mode="search" : build the LPS (failure) table up front, then scan the
                  text, showing every comparison, every match and every
                  mismatch jump.
  mode="lps"    : step through the construction of the LPS table itself.

An empty text or pattern yields a single snapshot saying there is nothing
to search.
"""

from typing import Generator, List

from algorithms.step import Snapshot, SnapshotBuilder


PSEUDOCODE: List[str] = [
    "lps ← build_lps(pattern); i ← 0; j ← 0",         # 0
    "while i < n:",                                   # 1
    "    if text[i] == pattern[j]:",                  # 2
    "        i += 1; j += 1",                         # 3
    "        if j == m: report match at i - m",       # 4
    "            j ← lps[j - 1]",                     # 5
    "    elif j > 0: j ← lps[j - 1]",                 # 6
    "    else: i += 1",                               # 7
]

PSEUDOCODE_LPS: List[str] = [
    "lps[0] ← 0; len ← 0; i ← 1",                     # 0
    "while i < m:",                                   # 1
    "    if pattern[i] == pattern[len]:",             # 2
    "        len += 1; lps[i] ← len; i += 1",         # 3
    "    elif len > 0: len ← lps[len - 1]",           # 4
    "    else: lps[i] ← 0; i += 1",                   # 5
]

MODES = ("search", "lps")

DEFAULT_TEXT = "ABABDABACDABABCABAB"
DEFAULT_PATTERN = "ABABCABAB"


def build_lps(pattern: str) -> List[int]:
    lps = [0] * len(pattern)
    length, i = 0, 1
    while i < len(pattern):
        if pattern[i] == pattern[length]:
            length += 1
            lps[i] = length
            i += 1
        elif length:
            length = lps[length - 1]
        else:
            lps[i] = 0
            i += 1
    return lps


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def kmp(
    text: str = DEFAULT_TEXT,
    pattern: str = DEFAULT_PATTERN,
    mode: str = "search",
) -> Generator[Snapshot, None, None]:
    if mode == "lps":
        yield from _lps_walkthrough(pattern)
    else:
        yield from _search(text, pattern)


def _search(text: str, pattern: str) -> Generator[Snapshot, None, None]:
    sb = SnapshotBuilder()
    n, m = len(text), len(pattern)
    if n == 0 or m == 0:
        yield sb.build("Nothing to search: text and pattern must both be non-empty",
                       final=True, text=text, pattern=pattern, lps=[], matches=[],
                       text_index=0, pattern_index=0, comparing=[])
        return

    lps = build_lps(pattern)
    matches: List[int] = []

    def snap(description, line, i, j, final=False, **extra):
        extra.setdefault("comparing", [])
        return sb.build(description, line=line, final=final, text=text, pattern=pattern,
                        lps=lps, matches=matches, text_index=i, pattern_index=j, **extra)

    yield snap(f"Built LPS array: [{', '.join(map(str, lps))}]", 0, 0, 0)

    i = j = 0
    while i < n:
        yield snap(f"Comparing text[{i}]='{text[i]}' with pattern[{j}]='{pattern[j]}'",
                   2, i, j, comparing=[i, j])
        if text[i] == pattern[j]:
            i += 1
            j += 1
            if j == m:
                matches.append(i - j)
                yield snap(f"Found match at index {i - j}!", 4, i, j, match_found=i - j)
                j = lps[j - 1]
        elif j:
            yield snap(f"Mismatch! Using LPS to jump pattern index from {j} to {lps[j - 1]}",
                       6, i, j, mismatch=True, jump=lps[j - 1])
            j = lps[j - 1]
        else:
            yield snap("Mismatch! Moving text index forward", 7, i, j, mismatch=True)
            i += 1

    yield snap(f"Search complete. Found {len(matches)} match(es)", 1, n, 0,
               final=True, complete=True)


def _lps_walkthrough(pattern: str) -> Generator[Snapshot, None, None]:
    sb = SnapshotBuilder()
    m = len(pattern)
    if m == 0:
        yield sb.build("Nothing to build: the pattern is empty", final=True,
                       pattern=pattern, lps=[], comparing=[])
        return

    lps = [0]
    length, i = 0, 1

    def snap(description, line, final=False, **extra):
        extra.setdefault("comparing", [])
        return sb.build(description, line=line, final=final, pattern=pattern, lps=lps, **extra)

    yield snap("Building LPS (Longest Proper Prefix which is also Suffix)", 0, i=1, len=0)

    while i < m:
        if pattern[i] == pattern[length]:
            length += 1
            lps.append(length)
            yield snap(
                f"Match! pattern[{i}]='{pattern[i]}' == pattern[{length - 1}]='{pattern[length - 1]}', "
                f"lps[{i}]={length}",
                3, i=i, len=length, comparing=[i, length - 1], match=True,
            )
            i += 1
        elif length:
            yield snap(f"Mismatch! Falling back len from {length} to {lps[length - 1]}",
                       4, i=i, len=length, comparing=[i, length], mismatch=True)
            length = lps[length - 1]
        else:
            lps.append(0)
            yield snap(f"No prefix found, lps[{i}]=0", 5, i=i, len=0)
            i += 1

    yield snap(f"LPS array complete: [{', '.join(map(str, lps))}]", 1, final=True, complete=True)
