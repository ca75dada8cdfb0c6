"""Entity filter tests — parsing, compilation to predicate IR, in-memory evaluation.

Tests cover:
    - Leaf compilation lower-cases keys/values; empty value lists mean "key exists"
    - match_value_exists=False compiles to a negation of the positive condition
    - AND / OR nesting compiles recursively; None matches everything
    - Unknown nodes and malformed node content rejected by compile_filter and parse_filter
    - parse_filter accepts {key}, {allOf}, {anyOf} and validates field types
    - parse_filter_params builds OR-of-AND filters from query strings
    - evaluate_predicate semantics, including empty AND / OR

Design Decisions:
    - Pure core functions: no mocks, no fixtures, just data in -> data out
"""

import pytest

from catalog.core.entity_filter import (
    AllOfFilter, AnyOfFilter, Conjunction, Disjunction, EntitiesSearchFilter,
    HasFact, MatchAll, Negate,
    compile_filter, evaluate_predicate, parse_filter, parse_filter_params,
)
from catalog.core.errors import InvalidFilterError

_FACTS = [("kind", "Component"), ("spec.owner", "team-a"), ("spec.owner", "team-b")]


# --- compile_filter -------------------------------------------------------------

def test_absent_filter_matches_all():
    assert compile_filter(None) == MatchAll()


def test_leaf_with_values_is_lower_cased():
    predicate = compile_filter(EntitiesSearchFilter("Kind", ("Component", "API")))
    assert predicate == HasFact("kind", frozenset({"component", "api"}))


def test_leaf_without_values_checks_key_only():
    assert compile_filter(EntitiesSearchFilter("kind")) == HasFact("kind", None)


def test_leaf_with_empty_values_checks_key_only():
    assert compile_filter(EntitiesSearchFilter("kind", ())) == HasFact("kind", None)


def test_negated_leaf_wraps_positive_condition():
    predicate = compile_filter(
        EntitiesSearchFilter("kind", ("api",), match_value_exists=False),
    )
    assert predicate == Negate(HasFact("kind", frozenset({"api"})))


def test_nested_filters_compile_recursively():
    predicate = compile_filter(AnyOfFilter((
        AllOfFilter((EntitiesSearchFilter("a"), EntitiesSearchFilter("b", ("x",)))),
        EntitiesSearchFilter("c"),
    )))
    assert predicate == Disjunction((
        Conjunction((HasFact("a"), HasFact("b", frozenset({"x"})))),
        HasFact("c"),
    ))


@pytest.mark.parametrize("node", [{"key": "kind"}, "kind=component", 42])
def test_compile_rejects_unknown_nodes(node):
    with pytest.raises(InvalidFilterError):
        compile_filter(node)


def test_compile_rejects_unknown_nested_node():
    with pytest.raises(InvalidFilterError):
        compile_filter(AllOfFilter((EntitiesSearchFilter("a"), {"anyOf": []})))


def test_compile_rejects_empty_key():
    with pytest.raises(InvalidFilterError):
        compile_filter(EntitiesSearchFilter(""))


@pytest.mark.parametrize("node", [AllOfFilter(None), AnyOfFilter(None), AnyOfFilter("kind")])
def test_compile_rejects_composites_without_child_sequence(node):
    with pytest.raises(InvalidFilterError):
        compile_filter(node)


@pytest.mark.parametrize("leaf", [
    EntitiesSearchFilter("kind", "component"),
    EntitiesSearchFilter("kind", ("component", 7)),
    EntitiesSearchFilter("kind", ("component",), match_value_exists="no"),
])
def test_compile_rejects_malformed_leaf_content(leaf):
    with pytest.raises(InvalidFilterError):
        compile_filter(leaf)


def test_compile_accepts_list_of_values():
    predicate = compile_filter(EntitiesSearchFilter("kind", ["Component"]))
    assert predicate == HasFact("kind", frozenset({"component"}))


# --- evaluate_predicate -----------------------------------------------------------

def test_has_fact_with_values_is_case_insensitive():
    assert evaluate_predicate(HasFact("kind", frozenset({"component"})), _FACTS)
    assert not evaluate_predicate(HasFact("kind", frozenset({"api"})), _FACTS)


def test_negation_of_values_allows_other_values():
    predicate = compile_filter(
        EntitiesSearchFilter("spec.owner", ("team-c",), match_value_exists=False),
    )
    assert evaluate_predicate(predicate, _FACTS)


def test_negation_fails_when_any_value_matches():
    predicate = compile_filter(
        EntitiesSearchFilter("spec.owner", ("TEAM-B",), match_value_exists=False),
    )
    assert not evaluate_predicate(predicate, _FACTS)


def test_negation_of_key_matches_missing_key():
    predicate = compile_filter(EntitiesSearchFilter("spec.system", match_value_exists=False))
    assert evaluate_predicate(predicate, _FACTS)


def test_null_fact_value_satisfies_key_exists_only():
    facts = [("spec.owner", None)]
    assert evaluate_predicate(HasFact("spec.owner"), facts)
    assert not evaluate_predicate(HasFact("spec.owner", frozenset({"team-a"})), facts)


def test_empty_conjunction_matches_and_empty_disjunction_does_not():
    assert evaluate_predicate(Conjunction(()), _FACTS)
    assert not evaluate_predicate(Disjunction(()), _FACTS)


# --- parse_filter -----------------------------------------------------------------

def test_parse_leaf():
    parsed = parse_filter({
        "key": "kind", "matchValueIn": ["component"], "matchValueExists": False,
    })
    assert parsed == EntitiesSearchFilter("kind", ("component",), False)


def test_parse_nested_tree():
    parsed = parse_filter({"anyOf": [
        {"allOf": [{"key": "a"}, {"key": "b", "matchValueIn": ["x"]}]},
        {"key": "c"},
    ]})
    assert parsed == AnyOfFilter((
        AllOfFilter((EntitiesSearchFilter("a"), EntitiesSearchFilter("b", ("x",)))),
        EntitiesSearchFilter("c"),
    ))


def test_parse_none_is_absent_filter():
    assert parse_filter(None) is None


@pytest.mark.parametrize("raw", [
    {},
    {"not": {"key": "kind"}},
    {"key": "kind", "allOf": []},
    {"key": ""},
    {"key": 5},
    {"key": "kind", "matchValueIn": "component"},
    {"key": "kind", "matchValueIn": [1]},
    {"key": "kind", "matchValueExists": "yes"},
    {"key": "kind", "extra": True},
    {"allOf": {"key": "kind"}},
    {"anyOf": [{"key": "kind"}], "allOf": []},
    {"allOf": [{"unknown": 1}]},
    ["kind"],
])
def test_parse_rejects_unrecognized_shapes(raw):
    with pytest.raises(InvalidFilterError) as exc_info:
        parse_filter(raw)
    assert exc_info.value.code == "INVALID_FILTER"


# --- parse_filter_params ----------------------------------------------------------

def test_params_build_or_of_and():
    parsed = parse_filter_params(["kind=component,spec.type=service", "kind=api"])
    assert parsed == AnyOfFilter((
        AllOfFilter((
            EntitiesSearchFilter("kind", ("component",)),
            EntitiesSearchFilter("spec.type", ("service",)),
        )),
        AllOfFilter((EntitiesSearchFilter("kind", ("api",)),)),
    ))


def test_params_merge_repeated_keys_and_support_bare_keys():
    parsed = parse_filter_params(["kind=component, kind=api ,spec.owner"])
    assert parsed == AnyOfFilter((AllOfFilter((
        EntitiesSearchFilter("kind", ("component", "api")),
        EntitiesSearchFilter("spec.owner"),
    )),))


def test_params_without_expressions_is_absent_filter():
    assert parse_filter_params([]) is None


@pytest.mark.parametrize("expression", ["", "=component", "kind=a,,b=c"])
def test_params_reject_empty_keys(expression):
    with pytest.raises(InvalidFilterError):
        parse_filter_params([expression])
