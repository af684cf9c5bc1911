"""New-item command - show the default item of a dynamic-list field."""

import typer

from questionnaire.cli._app import app
from questionnaire.cli._common import load_config, resolve_schema, setup_logging
from questionnaire.cli._console import output_result, print_err
from questionnaire.runtime.repeatable import default_item
from questionnaire.schemas.form_schema import DynamicListField


@app.command("new-item", help="Print the default item for a dynamic-list field.")
def new_item_cmd(
    ctx: typer.Context,
    schema: str = typer.Argument(..., help="Schema file path or schema id"),
    field_name: str = typer.Argument(..., help="Name of a dynamic-list field"),
):
    """Print the item an 'add' action would append."""
    setup_logging(verbose=ctx.obj["verbose"], quiet=ctx.obj["quiet"])
    config = load_config()
    form = resolve_schema(schema, config)

    try:
        field = form.get_field(field_name)
    except KeyError:
        print_err(f"Unknown field: {field_name}")
        raise SystemExit(1)

    if not isinstance(field, DynamicListField):
        print_err(f"Field '{field_name}' is a {field.kind} field, not a dynamic list")
        raise SystemExit(1)

    output_result(default_item(field), ctx=ctx, title=field_name)
