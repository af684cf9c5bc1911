"""Process command - shape answers into a payload without validating."""

from pathlib import Path

import typer

from questionnaire.cli._app import app
from questionnaire.cli._common import load_answers, load_config, resolve_schema, setup_logging
from questionnaire.cli._console import output_result, print_err
from questionnaire.exceptions import SchemaError
from questionnaire.runtime.submission import process


@app.command("process", help="Drop hidden fields and print the clean answers.")
def process_cmd(
    ctx: typer.Context,
    schema: str = typer.Argument(..., help="Schema file path or schema id"),
    answers: Path = typer.Argument(..., help="Answers file (JSON or YAML)"),
):
    """Print the answers that would be submitted."""
    setup_logging(verbose=ctx.obj["verbose"], quiet=ctx.obj["quiet"])
    config = load_config()
    form = resolve_schema(schema, config)

    try:
        payload = process(form, load_answers(answers))
    except SchemaError as e:
        print_err(str(e))
        raise SystemExit(1)

    output_result(payload, ctx=ctx, title="Payload")
