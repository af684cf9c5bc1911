"""Tests for the event-driven form state reducer."""

import pytest

from questionnaire.runtime.cache import ValidatorCache
from questionnaire.runtime.reducer import (
    AnswerChanged,
    FormState,
    ItemAdded,
    ItemAnswerChanged,
    ItemRemoved,
    apply_event,
    reduce,
)


class TestApplyEvent:
    def test_answer_changed(self, gate_schema):
        answers = {"A": "no"}
        updated = apply_event(gate_schema, answers, AnswerChanged("A", "yes"))
        assert updated == {"A": "yes"}
        assert answers == {"A": "no"}

    def test_unknown_field(self, gate_schema):
        with pytest.raises(KeyError):
            apply_event(gate_schema, {}, AnswerChanged("ghost", 1))

    def test_item_added_to_missing_list(self, family_schema):
        updated = apply_event(family_schema, {}, ItemAdded("children"))
        assert updated["children"] == [{"name": "", "birthDate": "", "attendsSchool": False}]

    def test_item_events_need_list_field(self, family_schema):
        with pytest.raises(KeyError, match="not a dynamic-list"):
            apply_event(family_schema, {}, ItemAdded("fullName"))

    def test_item_removed(self, family_schema, family_answers):
        updated = apply_event(family_schema, family_answers, ItemRemoved("children", 0))
        assert [child["name"] for child in updated["children"]] == ["Ayşe"]
        assert len(family_answers["children"]) == 2

    def test_item_answer_changed(self, family_schema, family_answers):
        event = ItemAnswerChanged("children", 1, "attendsSchool", False)
        updated = apply_event(family_schema, family_answers, event)
        assert updated["children"][1]["attendsSchool"] is False
        assert family_answers["children"][1]["attendsSchool"] is True

    def test_unsupported_event(self, gate_schema):
        with pytest.raises(TypeError):
            apply_event(gate_schema, {}, object())


class TestReduce:
    def test_revealing_field_reports_its_error(self, gate_schema):
        state = reduce(gate_schema, "en", {"A": "no"}, AnswerChanged("A", "yes"))
        assert isinstance(state, FormState)
        assert state.answers == {"A": "yes"}
        assert state.errors["B"] == "B is required"

    def test_hiding_field_clears_its_error(self, gate_schema):
        state = reduce(gate_schema, "en", {"A": "yes", "B": ""}, AnswerChanged("A", "no"))
        assert state.errors["B"] is None

    def test_new_item_is_validated(self, family_schema, family_answers):
        state = reduce(family_schema, "en", family_answers, ItemAdded("children"))
        assert state.errors["children[2].name"] == "Name is required"
        assert state.errors["children[2].birthDate"] == "Birth date is required"

    def test_uses_given_cache(self, gate_schema):
        cache = ValidatorCache()
        state = FormState(answers={"A": "no"})
        for value in ("yes", "no", "yes"):
            state = reduce(gate_schema, "en", state.answers, AnswerChanged("A", value), cache=cache)
        assert (cache.hits, cache.misses) == (2, 1)
