"""Pattern rules and their specificity scores."""

import re
from dataclasses import dataclass, field

from .categories import ComponentCategory


# Character classes at least this wide count as "broad" (e.g. [A-Z0-9-])
_BROAD_CLASS_WIDTH = 27

_ESCAPE_CLASS_WIDTHS = {
    "d": 10,
    "w": 63,
    "s": 6,
    "D": 200,
    "W": 200,
    "S": 200,
}

_QUANTIFIER = re.compile(r"\{(\d*)(,?)(\d*)\}")
_META = re.compile(r"[\\.^$*+?{}\[\]()|]")
_GROUP_PREFIX = re.compile(r"^\?(?::|P<\w+>)")


@dataclass(frozen=True)
class _Atom:
    """One matchable unit of a pattern with its repetition bounds."""
    literal: bool  # Fixed literal text
    width: int  # Number of characters the atom accepts (0 = zero-width assertion)
    min_reps: int = 1
    max_reps: int | None = 1  # None = unbounded
    span: int = 1  # Characters fixed per repetition ("(?:LM|UA)" fixes 2)


def _class_width(body: str) -> int:
    """Approximate how many characters a [...] class body accepts."""
    if body.startswith("^"):
        return 200
    width = 0
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\" and i + 1 < len(body):
            width += _ESCAPE_CLASS_WIDTHS.get(body[i + 1], 1)
            i += 2
            continue
        if i + 2 < len(body) and body[i + 1] == "-":
            width += max(ord(body[i + 2]) - ord(ch) + 1, 1)
            i += 3
            continue
        if ch != "|":  # "[F|L]" is a common mistake for "[FL]"
            width += 1
        i += 1
    return max(width, 1)


def _group_end(pattern: str, start: int) -> int:
    """Index of the ")" closing the group opened at ``start``."""
    depth = 0
    i = start
    in_class = False
    while i < len(pattern):
        ch = pattern[i]
        if ch == "\\":
            i += 2
            continue
        if in_class:
            if ch == "]":
                in_class = False
        elif ch == "[":
            in_class = True
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return len(pattern) - 1


def _tokenize(body: str) -> list[_Atom]:
    atoms: list[_Atom] = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\" and i + 1 < len(body):
            esc = body[i + 1]
            if esc in _ESCAPE_CLASS_WIDTHS:
                atom = _Atom(literal=False, width=_ESCAPE_CLASS_WIDTHS[esc])
            elif esc in "bB":
                atom = _Atom(literal=False, width=0)
            else:
                atom = _Atom(literal=True, width=1)
            i += 2
        elif ch == "[":
            end = body.index("]", i + 2) if "]" in body[i + 2:] else len(body) - 1
            atom = _Atom(literal=False, width=_class_width(body[i + 1:end]))
            i = end + 1
        elif ch == "(":
            end = _group_end(body, i)
            inner = body[i + 1:end]
            literal_span = _literal_alternation_span(inner)
            if inner.startswith(("?=", "?!", "?<=", "?<!")):
                atom = _Atom(literal=False, width=0)
            elif literal_span:
                # "(?:LM|UA)" pins as many characters as its shortest branch
                atom = _Atom(literal=True, width=1, span=literal_span)
            else:
                # Alternation or sub-pattern: approximate by its breadth
                atom = _Atom(literal=False, width=_BROAD_CLASS_WIDTH - 1)
            i = end + 1
        elif ch == ".":
            atom = _Atom(literal=False, width=200)
            i += 1
        else:
            atom = _Atom(literal=True, width=1)
            i += 1

        # Quantifier
        min_reps, max_reps = 1, 1
        if i < len(body):
            q = body[i]
            if q == "?":
                min_reps, max_reps = 0, 1
                i += 1
            elif q == "*":
                min_reps, max_reps = 0, None
                i += 1
            elif q == "+":
                min_reps, max_reps = 1, None
                i += 1
            elif q == "{":
                match = _QUANTIFIER.match(body, i)
                if match:
                    low, comma, high = match.groups()
                    min_reps = int(low or 0)
                    if comma:
                        max_reps = int(high) if high else None
                    else:
                        max_reps = min_reps
                    i = match.end()
            if i < len(body) and body[i] in "?+" and body[i - 1] in "?*+}":
                i += 1  # lazy / possessive modifier
        atoms.append(_Atom(atom.literal, atom.width, min_reps, max_reps, atom.span))
    return atoms


def _split_top_level(pattern: str) -> list[str]:
    """Split on "|" outside groups and classes: "^A|B$" -> ["^A", "B$"]"""
    branches = []
    depth = 0
    in_class = False
    start = 0
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if ch == "\\":
            i += 2
            continue
        if in_class:
            if ch == "]":
                in_class = False
        elif ch == "[":
            in_class = True
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        elif ch == "|" and depth == 0:
            branches.append(pattern[start:i])
            start = i + 1
        i += 1
    branches.append(pattern[start:])
    return branches


def _literal_alternation_span(inner: str) -> int:
    """Shortest branch length of a group made only of literal branches, else 0."""
    inner = _GROUP_PREFIX.sub("", inner, count=1)
    branches = _split_top_level(inner)
    if any(not branch or _META.search(branch) for branch in branches):
        return 0
    return min(len(branch) for branch in branches)


def compute_specificity(pattern: str) -> tuple[int, int, int, int]:
    """Score how narrowly a pattern constrains a string.

    Returns ``(literal_prefix, anchored_end, constrained, -open_ended)``:

    - literal_prefix: literal characters right after ``^`` (0 if not anchored)
    - anchored_end: 1 when the pattern ends in ``$``
    - constrained: mandatory positions held by literals or narrow classes
    - open_ended: broad classes, wildcards and unbounded repetitions

    Tuples compare lexicographically, so a longer literal prefix always wins,
    and two rules with the same prefix are ordered by how much of the tail
    they pin down.
    """
    branches = _split_top_level(pattern)
    if len(branches) > 1:
        # "^A|B$" means "(^A)|(B$)": each branch keeps only its own anchors,
        # and the pattern is as specific as its weakest branch
        return min(compute_specificity(b) for b in branches)

    anchored_start = pattern.startswith("^")
    body = pattern[1:] if anchored_start else pattern
    anchored_end = body.endswith("$") and not body.endswith("\\$")
    if anchored_end:
        body = body[:-1]

    atoms = _tokenize(body)

    literal_prefix = 0
    if anchored_start:
        for atom in atoms:
            if not atom.literal or atom.min_reps != atom.max_reps:
                break
            literal_prefix += atom.min_reps * atom.span

    constrained = 0
    open_ended = 0
    for atom in atoms:
        if atom.width == 0:
            continue
        broad = atom.width >= _BROAD_CLASS_WIDTH
        if not broad:
            constrained += atom.min_reps * atom.span
        if broad or atom.max_reps is None:
            open_ended += 1

    return (literal_prefix, int(anchored_end), constrained, -open_ended)


@dataclass(frozen=True)
class Rule:
    """One pattern bound to a category and the provider that contributed it.

    Patterns are matched against the normalized MPN with ``fullmatch``.
    Specificity is computed from the pattern unless given explicitly.
    """
    pattern: str
    category: ComponentCategory
    provider_id: str
    specificity: tuple[int, ...] = ()
    regex: re.Pattern[str] = field(init=False, repr=False, compare=False, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "regex", re.compile(self.pattern, re.IGNORECASE))
        if not self.specificity:
            object.__setattr__(self, "specificity", compute_specificity(self.pattern))

    def matches(self, normalized: str) -> bool:
        return bool(normalized) and self.regex.fullmatch(normalized) is not None
