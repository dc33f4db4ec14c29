import threading

import pytest

from env_aware_props import resolve, extract_placeholders, has_placeholder
from env_aware_props.resolver import resolve_or_raise, substitute_once, as_getter
from env_aware_props.validators import CircularReferenceError


class TestResolve:
    def test_no_placeholders_is_fixed_point(self):
        assert resolve("plain text", {}) == "plain text"
        assert resolve("", {"a": "b"}) == ""

    def test_simple_substitution(self):
        assert resolve("${host}:8080", {"host": "localhost"}) == "localhost:8080"

    def test_idempotent_on_resolved_string(self):
        lookup = {"a": "1", "b": "${a}2"}
        once = resolve("${b}3", lookup)
        assert once == "123"
        assert resolve(once, lookup) == once

    def test_chained_references(self):
        lookup = {"key1": "${key2}", "key2": "${key3}", "key3": "The real key1 value is here"}
        assert resolve("${key1}", lookup) == "The real key1 value is here"

    def test_nested_indirection(self):
        lookup = {
            "key.33": "java.class.path",
            "java.class.path": "/x/y",
        }
        assert resolve("${${key.33}}", lookup) == "/x/y"

    def test_missing_target_kept_verbatim(self):
        assert resolve("a ${missing} b", {}) == "a ${missing} b"

    def test_none_value_treated_as_missing(self):
        assert resolve("${a}", {"a": None}) == "${a}"

    def test_all_identical_tokens_replaced(self):
        assert resolve("${x}-${x}-${x}", {"x": "1"}) == "1-1-1"

    def test_malformed_placeholders_ignored(self):
        lookup = {"a": "1", "a b": "2"}
        assert resolve("${a", lookup) == "${a"
        assert resolve("${}", lookup) == "${}"
        assert resolve("${a b}", lookup) == "${a b}"
        assert resolve("$a", lookup) == "$a"

    def test_allowed_name_characters(self):
        lookup = {"A-b_c.9": "ok"}
        assert resolve("${A-b_c.9}", lookup) == "ok"

    def test_none_input_propagates(self):
        assert resolve(None, {"a": "b"}) is None

    def test_callable_lookup(self):
        assert resolve("${name}", lambda k: k.upper()) == "NAME"

    def test_replacement_is_literal(self):
        # Regex replacement syntax must not be interpreted
        assert resolve("${a}", {"a": r"\1 $0 \g<0>"}) == r"\1 $0 \g<0>"


class TestCircularReference:
    def test_mutual_reference_returns_original(self):
        lookup = {"a": "${b}", "b": "${a}"}
        assert resolve("${b}", lookup) == "${b}"
        assert resolve("${a}", lookup) == "${a}"

    def test_self_reference_returns_original(self):
        lookup = {"a": "x${a}"}
        assert resolve("${a}", lookup) == "${a}"

    def test_cycle_inside_text_returns_original_not_partial(self):
        lookup = {"a": "${b}", "b": "${a}", "c": "C"}
        raw = "${c} and ${a}"
        assert resolve(raw, lookup) == raw

    def test_depth_limit_is_configurable(self):
        # three changing passes plus one pass to confirm the fixed point
        lookup = {"a": "${b}", "b": "${c}", "c": "done"}
        assert resolve("${a}", lookup, max_depth=3) == "${a}"
        assert resolve("${a}", lookup, max_depth=4) == "done"

    def test_resolve_or_raise_signals_cycle(self):
        with pytest.raises(CircularReferenceError) as exc:
            resolve_or_raise("${a}", as_getter({"a": "${b}", "b": "${a}"}), max_depth=10)
        assert exc.value.raw == "${a}"
        assert exc.value.max_depth == 10

    def test_invalid_max_depth(self):
        with pytest.raises(ValueError):
            resolve("x", {}, max_depth=0)


class TestSubstituteOnce:
    def test_single_pass_only(self):
        lookup = {"a": "${b}", "b": "B"}
        assert substitute_once("${a}", lookup.get) == "${b}"

    def test_later_token_rewrites_earlier_insertion(self):
        # ${b} inserted for ${a} is replaced by the ${b} match in the same pass
        lookup = {"a": "${b}", "b": "B"}
        assert substitute_once("${a}${b}", lookup.get) == "BB"


class TestConcurrency:
    def test_concurrent_resolution_with_different_lookups(self):
        results = {}

        def worker(i):
            results[i] = resolve("${v}-${w}", {"v": str(i), "w": "${v}"})

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results == {i: f"{i}-{i}" for i in range(20)}


class TestExtractor:
    def test_extract_placeholders(self):
        placeholders = extract_placeholders("Hello ${name}, ${x.y}")
        assert [p["name"] for p in placeholders] == ["name", "x.y"]
        assert placeholders[0]["raw"] == "${name}"
        assert placeholders[0]["start"] == 6

    def test_extract_empty(self):
        assert extract_placeholders(None) == []
        assert extract_placeholders("none here") == []

    def test_has_placeholder(self):
        assert has_placeholder("${a}")
        assert not has_placeholder("${a")
        assert not has_placeholder(None)
