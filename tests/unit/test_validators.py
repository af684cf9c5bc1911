"""Unit tests for the validation compiler."""

import pytest

from questionnaire.runtime.localization import MessageCatalog
from questionnaire.runtime.validators import compile_validator, validate
from questionnaire.schemas.results import collect_errors, has_errors


def single_field_schema(field):
    return {"id": "single", "sections": [{"id": "main", "fields": [field]}]}


def errors_for(field, value, language="en", **kwargs):
    validator = compile_validator(single_field_schema(field), language, **kwargs)
    return validate(validator, {field["name"]: value})


class TestTextRules:
    """Text and textarea: trim, required, length, pattern, numeric bounds."""

    REQUIRED = {"name": "t", "type": "text", "label": {"en": "Title"}, "required": True}

    @pytest.mark.parametrize("value", ["", "   ", None])
    def test_required_rejects_blank(self, value):
        assert errors_for(self.REQUIRED, value)["t"] == "Title is required"

    def test_required_accepts_text(self):
        assert errors_for(self.REQUIRED, "ok")["t"] is None

    def test_min_length(self):
        field = {"name": "t", "type": "text", "validation": {"minLength": 3}}
        assert errors_for(field, "ab")["t"] == "Enter at least 3 characters"
        assert errors_for(field, "abc")["t"] is None

    def test_length_uses_trimmed_value(self):
        field = {"name": "t", "type": "text", "validation": {"minLength": 3}}
        assert errors_for(field, "  ab  ")["t"] is not None

    def test_max_length(self):
        field = {"name": "t", "type": "textarea", "validation": {"maxLength": 4}}
        assert errors_for(field, "abcde")["t"] == "Enter at most 4 characters"
        assert errors_for(field, "abcd")["t"] is None

    def test_optional_absent_skips_other_checks(self):
        field = {"name": "t", "type": "text", "validation": {"minLength": 3, "pattern": "[0-9]+"}}
        validator = compile_validator(single_field_schema(field), "en")
        assert validate(validator, {})["t"] is None
        assert errors_for(field, None)["t"] is None

    @pytest.mark.parametrize("value", ["", "   "])
    def test_optional_blank_still_bounded(self, value):
        field = {"name": "t", "type": "text", "validation": {"minLength": 3}}
        assert errors_for(field, value)["t"] == "Enter at least 3 characters"

    def test_optional_blank_must_match_pattern(self):
        field = {"name": "t", "type": "textarea", "validation": {"pattern": "[0-9]+"}}
        assert errors_for(field, "  ")["t"] == "Enter a valid format"
        assert errors_for(field, "")["t"] == "Enter a valid format"

    def test_optional_blank_skips_numeric_bounds(self):
        field = {"name": "t", "type": "text", "validation": {"min": 1}}
        assert errors_for(field, "")["t"] is None

    def test_pattern_must_match_whole_value(self):
        field = {"name": "t", "type": "text", "validation": {"pattern": "[0-9]{3}"}}
        assert errors_for(field, "123")["t"] is None
        assert errors_for(field, "1234")["t"] == "Enter a valid format"
        assert errors_for(field, " 123 ")["t"] is None

    def test_numeric_bounds(self):
        field = {"name": "t", "type": "text", "label": {"en": "Age"},
                 "validation": {"min": 18, "max": 65}}
        assert errors_for(field, "30")["t"] is None
        assert errors_for(field, "17")["t"] == "Age must be at least 18"
        assert errors_for(field, "66")["t"] == "Age must be at most 65"
        assert errors_for(field, "thirty")["t"] == "Age must be a number"

    def test_non_string_is_invalid_type(self):
        field = {"name": "t", "type": "text", "label": {"en": "Title"}}
        assert errors_for(field, 42)["t"] == "Title has an invalid value"


class TestDateRules:
    """Dates only check presence."""

    def test_required_rejects_empty(self):
        field = {"name": "d", "type": "date", "label": {"en": "Date"}, "required": True}
        assert errors_for(field, "")["d"] == "Date is required"
        assert errors_for(field, None)["d"] == "Date is required"

    def test_no_calendar_check(self):
        field = {"name": "d", "type": "date", "required": True}
        assert errors_for(field, "2023-02-30")["d"] is None


class TestBooleanRules:
    """Required booleans must be True."""

    FIELD = {"name": "c", "type": "boolean", "label": {"en": "Consent"}, "required": True}

    def test_rejects_false(self):
        assert errors_for(self.FIELD, False)["c"] == "Consent must be accepted"

    def test_absent_defaults_to_false(self):
        validator = compile_validator(single_field_schema(self.FIELD), "en")
        assert validate(validator, {})["c"] is not None

    def test_accepts_true(self):
        assert errors_for(self.FIELD, True)["c"] is None

    def test_optional_false_is_fine(self):
        field = {"name": "c", "type": "boolean"}
        assert errors_for(field, False)["c"] is None

    def test_string_true_is_invalid(self):
        assert errors_for(self.FIELD, "true")["c"] is not None


class TestSelectRules:
    """Select: presence, and option membership unless disabled."""

    FIELD = {
        "name": "s",
        "type": "select",
        "label": {"en": "Status"},
        "required": True,
        "options": [{"value": "a", "label": {"en": "A"}}, {"value": "b", "label": {"en": "B"}}],
    }

    def test_required_rejects_empty(self):
        assert errors_for(self.FIELD, "")["s"] == "Status is required"

    def test_accepts_declared_option(self):
        assert errors_for(self.FIELD, "b")["s"] is None

    def test_rejects_unknown_option(self):
        message = errors_for(self.FIELD, "zzz")["s"]
        assert message == "Select one of the available options for Status"

    def test_option_enforcement_can_be_disabled(self):
        assert errors_for(self.FIELD, "zzz", enforce_select_options=False)["s"] is None


class TestDynamicListRules:
    """Lists: item count plus independent per-item validation."""

    FIELD = {
        "name": "children",
        "type": "dynamicList",
        "label": {"en": "Children"},
        "required": True,
        "fields": [
            {"name": "name", "type": "text", "label": {"en": "Name"}, "required": True},
            {"name": "birthDate", "type": "date", "label": {"en": "Birth date"}, "required": True},
        ],
    }

    def test_required_rejects_empty_list(self):
        assert errors_for(self.FIELD, [])["children"] == "Children is required"

    def test_required_rejects_absent(self):
        assert errors_for(self.FIELD, None)["children"] == "Children is required"

    def test_accepts_valid_item(self):
        errors = errors_for(self.FIELD, [{"name": "Ali", "birthDate": "2020-01-01"}])
        assert not has_errors(errors)

    def test_items_fail_independently(self):
        items = [
            {"name": "", "birthDate": "2020-01-01"},
            {"name": "ok", "birthDate": ""},
        ]
        errors = errors_for(self.FIELD, items)
        assert errors["children"] is None
        assert errors["children[0].name"] == "Name is required"
        assert errors["children[1].birthDate"] == "Birth date is required"
        assert "children[0].birthDate" not in errors
        assert "children[1].name" not in errors

    def test_non_list_is_invalid_type(self):
        assert errors_for(self.FIELD, "Ali")["children"] == "Children has an invalid value"

    def test_non_mapping_item(self):
        errors = errors_for(self.FIELD, ["Ali"])
        assert errors["children[0]"] == "Children has an invalid value"


class TestTwoPhaseRequired:
    """Conditional fields are only enforced while visible."""

    def test_hidden_required_field_reports_nothing(self, gate_schema):
        validator = compile_validator(gate_schema, "en")
        errors = validate(validator, {"A": "no"})
        assert errors["B"] is None
        assert not has_errors(errors)

    def test_unanswered_gate_hides_field(self, gate_schema):
        validator = compile_validator(gate_schema, "en")
        assert validate(validator, {})["B"] is None

    def test_visible_required_field_is_enforced(self, gate_schema):
        validator = compile_validator(gate_schema, "en")
        errors = validate(validator, {"A": "yes", "B": ""})
        assert errors["B"] == "B is required"

    def test_hidden_invalid_value_is_ignored(self, gate_schema):
        validator = compile_validator(gate_schema, "en")
        assert validate(validator, {"A": "no", "B": 123})["B"] is None

    def test_rules_are_split_by_phase(self, gate_schema):
        validator = compile_validator(gate_schema, "en")
        assert [c.name for c in validator.static_rules] == ["A"]
        assert [c.name for c in validator.gated_rules] == ["B"]

    def test_hidden_list_skips_item_errors(self, family_schema, family_answers):
        validator = compile_validator(family_schema, "en")
        answers = {**family_answers, "hasChildren": False, "children": [{"name": ""}]}
        errors = validate(validator, answers)
        assert errors["children"] is None
        assert not any(key.startswith("children[") for key in errors)


class TestErrorMap:
    """Shape and ordering of the error map."""

    def test_every_field_present_in_order(self, family_schema, family_answers):
        validator = compile_validator(family_schema, "en")
        errors = validate(validator, family_answers)
        assert list(errors) == family_schema.field_names()
        assert not has_errors(errors)

    def test_collect_errors_keeps_messages_only(self, family_schema):
        validator = compile_validator(family_schema, "en")
        failing = collect_errors(validate(validator, {}))
        assert list(failing) == ["fullName", "maritalStatus", "consent"]

    def test_item_errors_follow_fields(self, family_schema, family_answers):
        validator = compile_validator(family_schema, "en")
        answers = {**family_answers, "children": [{"name": "", "birthDate": "2020-01-01"}]}
        keys = list(validate(validator, answers))
        assert keys[-1] == "children[0].name"

    def test_validate_is_pure(self, family_schema, family_answers):
        validator = compile_validator(family_schema, "en")
        snapshot = {**family_answers, "children": [dict(c) for c in family_answers["children"]]}
        first = validate(validator, family_answers)
        second = validate(validator, family_answers)
        assert first == second
        assert family_answers == snapshot


class TestLanguage:
    """Messages are rendered for the compile-time language."""

    def test_turkish_messages(self, family_schema):
        validator = compile_validator(family_schema, "tr")
        errors = validate(validator, {})
        assert errors["fullName"] == "Ad soyad alanı zorunludur"
        assert errors["consent"] == "Bilgilerin doğruluğunu onaylıyorum alanı onaylanmalıdır"

    def test_unknown_language_falls_back_to_english(self, family_schema):
        validator = compile_validator(family_schema, "de")
        assert validate(validator, {})["fullName"] == "Full name is required"

    def test_label_falls_back_to_name(self):
        field = {"name": "nickname", "type": "text", "required": True}
        assert errors_for(field, "")["nickname"] == "nickname is required"

    def test_compile_is_idempotent(self, family_schema, family_answers):
        first = compile_validator(family_schema, "tr")
        second = compile_validator(family_schema, "tr")
        for answers in ({}, family_answers, {"maritalStatus": "married"}):
            assert validate(first, answers) == validate(second, answers)

    def test_custom_catalog(self):
        catalog = MessageCatalog({
            "required": {"en": "Missing: {{ label }}"},
            "invalid_type": {"en": "Bad {{ label }}"},
            "min_length": {"en": "x"},
            "max_length": {"en": "x"},
            "pattern": {"en": "x"},
            "not_a_number": {"en": "x"},
            "min_value": {"en": "x"},
            "max_value": {"en": "x"},
        })
        field = {"name": "t", "type": "text", "label": {"en": "Title"}, "required": True}
        assert errors_for(field, "", catalog=catalog)["t"] == "Missing: Title"


class TestPackageEntryPoints:
    """The top-level package exposes the presentation-layer calls."""

    def test_compile_alias(self, gate_schema):
        import questionnaire

        validator = questionnaire.compile(gate_schema, "en")
        errors = questionnaire.validate(validator, {"A": "yes"})
        assert errors == {"A": None, "B": "B is required"}
        assert questionnaire.is_visible(gate_schema.get_field("B"), {"A": "yes"})
        assert questionnaire.process(gate_schema, {"A": "no", "B": "x"}) == {"A": "no"}
