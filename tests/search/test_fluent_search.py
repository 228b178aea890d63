# Tests for the fluent search chain
# =================================

import pytest
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

import pandas as pd

from fluentsearch import search, text, InvalidArgumentError, EmptySequenceError


class TestSearchWithoutAction:
    """A chain that was never narrowed yields its source."""

    def test_search_without_action_returns_all_records(self, records):
        """search() alone leaves the records untouched."""
        result = search(records, lambda x: x.string_one).to_list()
        assert result == records

    def test_empty_term_list_passes_records_through(self, records):
        """containing() with no terms returns the very same record objects."""
        result = search(records, lambda x: x.string_one).containing().to_list()
        assert len(result) == len(records)
        assert all(a is b for a, b in zip(result, records))

    def test_blank_terms_pass_records_through(self, records):
        """None, empty and whitespace-only terms are skipped."""
        chain = search(records, "string_one")
        assert chain.containing(None, "", "   ") is chain
        assert chain.starts_with([]).count() == len(records)

    def test_search_all_fields_without_terms(self, records):
        """Search-all mode with no operation yields every record."""
        assert search(records).count() == len(records)


class TestContaining:
    """containing(): substring matches, any field, any term."""

    def test_contains_single_term(self, records):
        """Only records containing the term are returned."""
        result = search(records, lambda x: x.string_one).containing("abc").to_list()
        assert len(result) == 1
        assert all("abc" in x.string_one for x in result)

    def test_contains_across_two_fields(self, records):
        """A match in either field qualifies."""
        result = search(records, lambda x: x.string_one, lambda x: x.string_two).containing("cd").to_list()
        assert len(result) == 3
        assert all(
            "cd" in (x.string_one or "") or "cd" in (x.string_two or "")
            for x in result
        )

    def test_contains_multiple_terms(self, records):
        """Any of the terms qualifies; matching ignores case."""
        result = search(records, "string_one").containing("ab", "jk").to_list()
        assert [r.integer_one for r in result] == [1, 3, 7]

    def test_contains_many_fields_many_terms(self, records):
        """Fields x terms cross product is OR-ed."""
        result = search(records, "string_one", "string_two").containing("cd", "jk").to_list()
        assert [r.integer_one for r in result] == [1, 2, 3, 7]

    def test_contains_ignores_case(self, records):
        """Upper-case terms match lower-case values and vice versa."""
        result = search(records, "string_one").containing("AB", "jk").to_list()
        assert len(result) == 3
        assert all(
            "ab" in x.string_one.lower() or "jk" in x.string_one.lower()
            for x in result
        )

    def test_terms_given_as_list(self, records):
        """A list of terms is flattened."""
        as_list = search(records, "string_one").containing(["ab", "jk"]).to_list()
        as_args = search(records, "string_one").containing("ab", "jk").to_list()
        assert as_list == as_args

    def test_null_field_values_never_match(self, records):
        """Record 6 has no string_one and is silently skipped."""
        result = search(records, "string_one").containing("q", "m", "a", "e", "i").to_list()
        assert 6 not in [r.integer_one for r in result]
        assert len(result) == 6

    def test_contains_matches_expected_subset(self, records):
        """Result equals the records where some field contains some term."""
        terms = ["CD", "st"]
        expected = [
            r for r in records
            if any(
                t.lower() in (value or "").lower()
                for t in terms
                for value in (r.string_one, r.string_two)
            )
        ]
        result = search(records, "string_one", "string_two").containing(*terms).to_list()
        assert result == expected


class TestStartsWith:
    """starts_with(): prefix matches."""

    def test_starts_with_across_two_fields(self, records):
        """A prefix match in either field qualifies."""
        result = search(records, "string_one", "string_two").starts_with("ef").to_list()
        assert [r.integer_one for r in result] == [1, 2]

    def test_starts_with_multiple_terms(self, records):
        """Any prefix qualifies, ignoring case."""
        result = search(records, "string_one").starts_with("ab", "ef").to_list()
        assert [r.integer_one for r in result] == [1, 2, 7]

    def test_starts_with_many_fields_many_terms(self, records):
        """Fields x terms cross product is OR-ed."""
        result = search(records, "string_one", "string_two").starts_with("cd", "ef").to_list()
        assert [r.integer_one for r in result] == [1, 2]

    def test_starts_with_ignores_case(self, records):
        """'C' matches case, CASE and Cobalt."""
        result = search(records, lambda x: x.string_two).starts_with("C").to_list()
        assert len(result) == 3
        assert all(x.string_two.lower().startswith("c") for x in result)


class TestIsEqual:
    """is_equal(): whole-value matches ignoring case."""

    def test_is_equal(self, records):
        """Only exact values are returned."""
        result = search(records, "string_one").is_equal("abcd").to_list()
        assert len(result) == 1
        assert result[0].string_one == "abcd"

    def test_is_equal_ignores_case(self, records):
        """CASE matches case and CASE."""
        result = search(records, "string_two").is_equal("CASE").to_list()
        assert len(result) == 2
        assert all(x.string_two.lower() == "case" for x in result)

    def test_is_equal_many_terms(self, records):
        """Any term qualifies."""
        result = search(records, "string_one").is_equal("abcd", "efgh").to_list()
        assert [r.string_one for r in result] == ["abcd", "efgh"]

    def test_is_equal_many_terms_any_case(self, records):
        """Upper-case terms match lower-case values."""
        result = search(records, "string_one").is_equal("ABCD", "EFGH")
        assert result.count() == 2


class TestEqualTo:
    """equal_to(): exact, type-preserving equality."""

    def test_equal_to_identifier(self, records, record_ids):
        """Non-string fields can be matched exactly."""
        result = search(records, lambda x: x.id).equal_to(record_ids[2]).to_list()
        assert len(result) == 1
        assert result[0].string_one == "ijkl"

    def test_equal_to_is_case_sensitive(self, records):
        """Unlike is_equal, equal_to compares strings as they are."""
        assert search(records, "string_two").equal_to("CASE").count() == 1
        assert search(records, "string_two").is_equal("CASE").count() == 2

    def test_equal_to_skips_none(self, records):
        """None values impose no constraint."""
        assert search(records, "integer_one").equal_to(None).count() == len(records)


class TestChaining:
    """Chained operations AND-narrow the result."""

    def test_contains_then_starts_with(self, records):
        """Both conditions must hold."""
        result = search(records, lambda x: x.string_one).containing("abc").starts_with("a").to_list()
        assert len(result) == 1
        assert all(x.string_one.startswith("a") and "abc" in x.string_one for x in result)

    def test_chaining_equals_sequential_filtering(self, records):
        """containing(t1).starts_with(t2) == filter by t1, then by t2."""
        chained = search(records, "string_one", "string_two").containing("c").starts_with("e", "x").to_list()
        first = search(records, "string_one", "string_two").containing("c").to_list()
        sequential = search(first, "string_one", "string_two").starts_with("e", "x").to_list()
        assert chained == sequential
        assert [r.integer_one for r in chained] == [1, 2, 3]

    def test_chain_is_immutable(self, records):
        """Branching a chain leaves the base and the sibling unaffected."""
        base = search(records, "string_one")
        left = base.containing("a")
        right = base.containing("i")

        assert base.count() == len(records)
        assert [r.integer_one for r in left] == [1, 7]
        assert [r.integer_one for r in right] == [3]
        assert base.predicate is None

    def test_search_switches_fields(self, records):
        """chain.search() re-selects fields and keeps the predicate."""
        result = (
            search(records, "string_one").starts_with("a")
            .search("string_two").containing("e")
            .to_list()
        )
        assert [r.integer_one for r in result] == [1]

    def test_where_adds_python_condition(self, records):
        """where() filters after the search predicate."""
        result = search(records, "string_one").containing("a").where(lambda r: r.integer_one > 1).to_list()
        assert [r.integer_one for r in result] == [7]


class TestSearchAll:
    """search() without fields searches every string field."""

    def test_search_all_contains(self, records):
        """Same records as listing every string field explicitly."""
        implicit = search(records).containing("cd").to_list()
        explicit = search(records, "string_one", "string_two", "string_three").containing("cd").to_list()
        assert len(implicit) == 3
        assert implicit == explicit

    def test_search_all_includes_third_field(self, records):
        """string_three is searched too; non-string fields are not."""
        result = search(records).is_equal("wxyz").to_list()
        assert [r.integer_one for r in result] == [1]

    def test_search_all_on_generator(self, records):
        """The record type of a one-shot iterator comes from its first record."""
        result = search(r for r in records).containing("cd")
        assert [r.integer_one for r in result] == [1, 2, 3]

    def test_search_all_on_generator_keeps_first_record(self, records):
        """Discovering fields does not drop the record it inspected."""
        chain = search(r for r in records).is_equal("abcd")
        assert [r.integer_one for r in chain] == [1, 2]

    def test_search_all_with_record_type(self, records):
        result = search((r for r in records), record_type=type(records[0])).containing("cd")
        assert result.count() == 3

    def test_generator_without_operation(self, records):
        """No field discovery happens until an operation needs the fields."""
        assert search(r for r in records).count() == len(records)

    def test_generator_distance_without_fields(self, records):
        result = search(r for r in records).levenshtein_distance_of("string_one").compared_to("abce").to_list()
        assert [x.distance for x in result] == [1, 4, 4, 4, 4, 4, 4]

    def test_search_all_on_dicts(self, records):
        """Mapping records use their string-valued keys."""
        rows = [{"name": "alpha", "code": 1}, {"name": "beta", "code": 2}]
        assert search(rows).containing("ph").to_list() == [rows[0]]

    def test_search_all_on_dicts_with_leading_none(self):
        """A key that is None in the first dict is still searched."""
        rows = [{"a": None, "b": "x"}, {"a": "hit", "b": "y"}]
        implicit = search(rows).containing("hit").to_list()
        explicit = search(rows, "a", "b").containing("hit").to_list()
        assert implicit == explicit == [rows[1]]

    def test_search_all_on_frame_with_integer_labels(self):
        """Column labels are used as they are, not as text."""
        frame = pd.DataFrame([["alpha", 1], ["beta", 2]])
        result = search(frame).containing("et").to_list()
        assert result == [{0: "beta", 1: 2}]


class TestNonTextFields:
    """String operations on fields that do not hold text."""

    def test_string_test_on_integer_field_names_the_field(self):
        rows = [{"code": 1}, {"code": 12}]
        chain = search(rows, "code").containing("1")
        with pytest.raises(InvalidArgumentError, match="code"):
            chain.to_list()

    def test_text_makes_field_searchable(self):
        rows = [{"code": 1}, {"code": 12}]
        result = search(rows, lambda r: text(r["code"])).containing("2").to_list()
        assert result == [rows[1]]


class TestSelectors:
    """Field selectors: callables, paths and text()."""

    def test_dotted_path(self):
        """Nested attributes are reached through a dotted path."""
        rows = [{"address": {"city": "Leeds"}}, {"address": {"city": "York"}}, {"address": None}]
        result = search(rows, "address.city").starts_with("le").to_list()
        assert result == [rows[0]]

    def test_method_call_in_selector(self):
        """Selectors may call methods of field values."""
        rows = [{"name": "  padded  "}, {"name": "plain"}]
        result = search(rows, lambda r: r["name"].strip()).is_equal("padded").to_list()
        assert result == [rows[0]]

    def test_text_selector(self, records, record_ids):
        """text() searches a non-string field as text."""
        prefix = str(record_ids[0])[:8]
        result = search(records, lambda x: text(x.id)).starts_with(prefix).to_list()
        assert [r.integer_one for r in result] == [1]


class TestArgumentValidation:
    """Invalid arguments fail when the chain is built."""

    def test_none_source(self):
        with pytest.raises(InvalidArgumentError):
            search(None, "string_one")

    def test_none_selector(self, records):
        with pytest.raises(InvalidArgumentError):
            search(records, None)

    def test_untraceable_selector(self, records):
        """str() on a field cannot be recorded."""
        with pytest.raises(InvalidArgumentError):
            search(records, lambda x: str(x.id))

    def test_branching_selector(self, records):
        """Selectors cannot branch on field values."""
        with pytest.raises(InvalidArgumentError):
            search(records, lambda x: x.string_one if x.string_two else x.string_three)

    def test_non_string_term(self, records):
        with pytest.raises(InvalidArgumentError):
            search(records, "string_one").containing(42)

    def test_string_source_rejected(self):
        with pytest.raises(InvalidArgumentError):
            search("abcd", "string_one")


class TestLazyEvaluation:
    """Results are computed on demand."""

    def test_nothing_evaluated_before_iteration(self, records):
        """Building the chain reads no records."""
        seen = []

        def tracking():
            for r in records:
                seen.append(r)
                yield r

        chain = search(tracking(), "string_one").containing("a")
        assert seen == []
        chain.first()
        assert len(seen) == 1

    def test_early_termination(self, records):
        """take() stops pulling records once it has enough."""
        seen = []

        def tracking():
            for r in records:
                seen.append(r)
                yield r

        result = search(tracking(), "string_two").containing("c").take(2)
        assert [r.integer_one for r in result] == [2, 3]
        assert len(seen) == 3

    def test_chain_is_restartable_over_lists(self, records):
        """A list source can be enumerated repeatedly."""
        chain = search(records, "string_one").containing("a")
        assert chain.to_list() == chain.to_list()

    def test_first_on_empty_result(self, records):
        chain = search(records, "string_one").containing("zzz")
        assert chain.first_or_none() is None
        assert not chain.any()
        with pytest.raises(EmptySequenceError):
            chain.first()

    def test_compiled_predicate(self, records):
        """compile() exposes the search as one function of a record."""
        matches = search(records, "string_one", "string_two").containing("cd").compile()
        assert [r.integer_one for r in records if matches(r)] == [1, 2, 3]
