"""Tests for pattern rules and specificity scoring."""

import pytest
from mpn_mcp.categories import ComponentCategory
from mpn_mcp.rules import Rule, compute_specificity

C = ComponentCategory


class TestComputeSpecificity:
    """Specificity is derived from pattern structure."""

    @pytest.mark.parametrize("pattern,expected", [
        (r"^LM358$", (5, 1, 5, 0)),
        (r"^LM358.*", (5, 0, 5, -1)),
        (r"LM358", (0, 0, 5, 0)),
        (r"^ST77[0-9]{2}[A-Z0-9-]*$", (4, 1, 6, -1)),
        (r"^ST[0-9]{3,4}[A-Z0-9-]*$", (2, 1, 5, -1)),
        (r"^504182-[0-9]{4}.*", (7, 0, 11, -1)),
        (r"^GD25Q\d+.*", (5, 0, 6, -2)),
        # Literal alternation groups pin their shortest branch
        (r"^(?:LM|UA)78[0-9]{2}(?:[A-Z]*(?:CT|T|KC|KV|MP|DT))?$", (4, 1, 6, 0)),
        (r"^(?:L|MC)7", (2, 0, 2, 0)),
        (r"^PN(?:2222|2907)A?$", (6, 1, 6, 0)),
        (r"^(?:[AB]|C)X", (0, 0, 2, 0)),
    ])
    def test_scores(self, pattern, expected):
        assert compute_specificity(pattern) == expected

    def test_longer_literal_prefix_wins(self):
        assert compute_specificity(r"^ST77[0-9]{2}[A-Z0-9-]*$") > compute_specificity(r"^ST[0-9]{3,4}[A-Z0-9-]*$")

    def test_end_anchor_beats_open_tail(self):
        assert compute_specificity(r"^LM358[A-Z]$") > compute_specificity(r"^LM358.*")

    def test_narrow_class_beats_broad_class(self):
        narrow = compute_specificity(r"^SI[0-9]{4}$")
        broad = compute_specificity(r"^SI[A-Z0-9]{4}$")
        assert narrow > broad

    def test_alternation_scored_by_weakest_branch(self):
        assert compute_specificity(r"^A|^BC") == (1, 0, 1, 0)

    def test_alternation_branches_keep_own_anchors(self):
        # "(^A)|(B$)": only the second branch is end-anchored, neither is both
        assert compute_specificity(r"^A|B$") == (0, 1, 1, 0)
        assert compute_specificity(r"^AB|CD$") == (0, 1, 2, 0)
        assert compute_specificity(r"^AB$|^CD$") == (2, 1, 2, 0)

    def test_alternation_inside_group_not_split(self):
        assert compute_specificity(r"^X(?:A|B)$") == (2, 1, 2, 0)

    def test_literal_group_prefix_beats_bare_prefix(self):
        assert compute_specificity(r"^(?:LM|UA)78[0-9]{2}$") > compute_specificity(r"^L.*")

    def test_lookahead_does_not_count(self):
        assert compute_specificity(r"^LM324(?![0-9])") == compute_specificity(r"^LM324")

    def test_deterministic(self):
        pattern = r"^(?:LM|UA)78[0-9]{2}(?:[A-Z]*(?:CT|T|KC|KV|MP|DT))?$"
        assert compute_specificity(pattern) == compute_specificity(pattern)


class TestRule:
    """Rule matching and construction."""

    def test_fullmatch_only(self):
        rule = Rule(pattern=r"LM358", category=C.OPAMP, provider_id="ti")
        assert rule.matches("LM358")
        assert not rule.matches("LM358N")
        assert not rule.matches("XLM358")

    def test_case_insensitive(self):
        rule = Rule(pattern=r"^LM358[A-Z]*$", category=C.OPAMP, provider_id="ti")
        assert rule.matches("lm358n")

    def test_empty_never_matches(self):
        rule = Rule(pattern=r".*", category=C.IC, provider_id="x")
        assert not rule.matches("")

    def test_specificity_computed_by_default(self):
        rule = Rule(pattern=r"^LM358$", category=C.OPAMP, provider_id="ti")
        assert rule.specificity == (5, 1, 5, 0)

    def test_explicit_specificity_kept(self):
        rule = Rule(pattern=r"^LM358$", category=C.OPAMP, provider_id="ti", specificity=(9, 9, 9, 0))
        assert rule.specificity == (9, 9, 9, 0)

    def test_equal_rules_hash_alike(self):
        a = Rule(pattern=r"^X$", category=C.IC, provider_id="p")
        b = Rule(pattern=r"^X$", category=C.IC, provider_id="p")
        assert a == b
        assert len({a, b}) == 1
