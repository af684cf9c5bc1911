"""Validate and submit commands - check answers against a schema."""

from pathlib import Path
from typing import Optional

import typer

from questionnaire.cli._app import app
from questionnaire.cli._common import (
    load_answers,
    load_config,
    resolve_language,
    resolve_schema,
    setup_logging,
)
from questionnaire.cli._console import output_errors, output_result, print_err, print_ok
from questionnaire.config import EngineConfig
from questionnaire.exceptions import ConfigError, SchemaError
from questionnaire.runtime.submission import submit
from questionnaire.runtime.validators import Validator, compile_validator
from questionnaire.schemas.results import collect_errors, has_errors


def _build_validator(schema: str, language: Optional[str], config: EngineConfig) -> Validator:
    form = resolve_schema(schema, config)
    try:
        return compile_validator(
            form,
            resolve_language(language, config),
            enforce_select_options=config.enforce_select_options,
            catalog=config.message_catalog(),
        )
    except (SchemaError, ConfigError) as e:
        print_err(str(e))
        raise SystemExit(1)


@app.command("validate", help="Validate an answers file; exit 1 when any field is invalid.")
def validate_cmd(
    ctx: typer.Context,
    schema: str = typer.Argument(..., help="Schema file path or schema id"),
    answers: Path = typer.Argument(..., help="Answers file (JSON or YAML)"),
    language: Optional[str] = typer.Option(None, "--lang", "-l", help="Language for messages"),
):
    """Print the error map for an answers file."""
    setup_logging(verbose=ctx.obj["verbose"], quiet=ctx.obj["quiet"])
    config = load_config()
    validator = _build_validator(schema, language, config)

    errors = validator.validate(load_answers(answers))
    output_errors(errors, ctx=ctx, title="Validation errors")

    if has_errors(errors):
        raise SystemExit(1)
    if not ctx.obj["json"] and not ctx.obj["quiet"]:
        print_ok("All visible fields are valid")


@app.command("submit", help="Validate, then print the submission payload.")
def submit_cmd(
    ctx: typer.Context,
    schema: str = typer.Argument(..., help="Schema file path or schema id"),
    answers: Path = typer.Argument(..., help="Answers file (JSON or YAML)"),
    language: Optional[str] = typer.Option(None, "--lang", "-l", help="Language for messages"),
):
    """Print the payload, or the errors blocking the submission (exit 1)."""
    setup_logging(verbose=ctx.obj["verbose"], quiet=ctx.obj["quiet"])
    config = load_config()
    validator = _build_validator(schema, language, config)

    result = submit(validator, load_answers(answers))
    if result.blocked:
        if not ctx.obj["json"]:
            print_err(f"Submission blocked by {len(collect_errors(result.errors))} invalid field(s)")
        output_errors(result.errors, ctx=ctx, title="Validation errors")
        raise SystemExit(1)

    output_result(result.payload, ctx=ctx, title="Payload")
