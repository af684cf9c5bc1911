"""
Pytest fixtures and configuration for questionnaire engine tests.
Provides sample schemas modelled on a family/employment application form.
"""

import json
from pathlib import Path

import pytest

from questionnaire.config import reset_engine_config_cache
from questionnaire.runtime.cache import reset_validator_cache
from questionnaire.schemas.form_schema import FormSchema

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def _reset_module_caches():
    """Module-level caches must not leak between tests."""
    reset_validator_cache()
    reset_engine_config_cache()
    yield
    reset_validator_cache()
    reset_engine_config_cache()


@pytest.fixture
def gate_schema_data():
    """Two fields: B is required but only shown when A is "yes"."""
    return {
        "id": "gate",
        "title": {"en": "Gate"},
        "sections": [
            {
                "id": "main",
                "title": {"en": "Main"},
                "fields": [
                    {
                        "name": "A",
                        "type": "select",
                        "label": {"en": "A"},
                        "options": [
                            {"value": "yes", "label": {"en": "Yes"}},
                            {"value": "no", "label": {"en": "No"}},
                        ],
                    },
                    {
                        "name": "B",
                        "type": "text",
                        "label": {"en": "B"},
                        "required": True,
                        "conditions": [{"field": "A", "operator": "eq", "value": "yes"}],
                    },
                ],
            }
        ],
    }


@pytest.fixture
def gate_schema(gate_schema_data):
    return FormSchema.model_validate(gate_schema_data)


@pytest.fixture
def family_schema_data():
    """Multi-section schema with conditions and a dynamic list."""
    with open(FIXTURES_DIR / "family_schema.json", "r", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def family_schema(family_schema_data):
    return FormSchema.model_validate(family_schema_data)


@pytest.fixture
def family_answers():
    """Complete, valid answers for the family schema."""
    return {
        "fullName": "Johannes Doe",
        "email": "johannes@example.com",
        "maritalStatus": "married",
        "spouseName": "Jane Doe",
        "hasChildren": True,
        "children": [
            {"name": "Ali", "birthDate": "2024-12-22", "attendsSchool": False},
            {"name": "Ayşe", "birthDate": "2020-01-01", "attendsSchool": True},
        ],
        "salary": "4200",
        "notes": "",
        "consent": True,
    }
