"""Check command - compile a schema and report its shape."""

from typing import Optional

import typer

from questionnaire.cli._app import app
from questionnaire.cli._common import load_config, resolve_language, resolve_schema, setup_logging
from questionnaire.cli._console import print_err, print_ok, output_result
from questionnaire.exceptions import ConfigError, SchemaError
from questionnaire.runtime.localization import resolve_text
from questionnaire.runtime.validators import compile_validator
from questionnaire.schemas.form_schema import DynamicListField


@app.command("check", help="Compile a schema and report structural errors.")
def check_cmd(
    ctx: typer.Context,
    schema: str = typer.Argument(..., help="Schema file path or schema id"),
    language: Optional[str] = typer.Option(None, "--lang", "-l", help="Language code"),
):
    """Compile the schema; exit 1 if it is malformed."""
    setup_logging(verbose=ctx.obj["verbose"], quiet=ctx.obj["quiet"])
    config = load_config()
    lang = resolve_language(language, config)
    form = resolve_schema(schema, config)

    try:
        validator = compile_validator(
            form,
            lang,
            enforce_select_options=config.enforce_select_options,
            catalog=config.message_catalog(),
        )
    except (SchemaError, ConfigError) as e:
        print_err(str(e))
        raise SystemExit(1)

    fields = list(form.iter_fields())
    summary = {
        "schema_id": form.id,
        "title": resolve_text(form.title, lang),
        "language": lang,
        "sections": len(form.sections),
        "fields": len(fields),
        "conditional_fields": [compiled.name for compiled in validator.gated_rules],
        "dynamic_lists": [field.name for field in fields if isinstance(field, DynamicListField)],
    }

    if not ctx.obj["json"] and not ctx.obj["quiet"]:
        print_ok(f"Schema '{form.id}' is valid")
    output_result(summary, ctx=ctx, title="Schema")
