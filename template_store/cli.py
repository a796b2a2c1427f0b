"""Command-line interface for Template Store."""

import asyncio
import json
from pathlib import Path

import click
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from .config import settings
from .exceptions import TemplateStoreError
from .models.enums import TemplateStatus
from .schemas.template import SaveTemplateInput, UpdateTemplateMetaInput
from .services.templates_backend import get_templates_backend
from .utils.thumbnail import decode_thumbnail


def _run(coro):
    return asyncio.run(coro)


def _echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


@click.group()
def cli():
    """Template Store CLI."""
    pass


@cli.command("list")
@click.option("--tag", "tags", multiple=True, help="Only templates carrying this tag")
def list_templates(tags):
    """List templates, most recently updated first."""
    try:
        templates = _run(get_templates_backend().list())
    except TemplateStoreError as e:
        click.echo(f"❌ Error: {e.message}", err=True)
        raise SystemExit(1)
    templates = [t for t in templates if all(tag in t.tags for tag in tags)]

    if not templates:
        click.echo("No templates found.")
        return

    click.echo(f"\n{'ID':<12} {'Status':<9} {'Updated':<20} Name")
    click.echo("-" * 70)
    for meta in templates:
        updated = meta.updated_at.strftime("%Y-%m-%d %H:%M:%S")
        click.echo(f"{meta.id:<12} {meta.status.value:<9} {updated:<20} {meta.name}")


@cli.command()
@click.argument("template_id")
@click.option("--versions", is_flag=True, help="Show the version history")
def show(template_id, versions):
    """Show a template."""
    try:
        record = _run(get_templates_backend().get(template_id))
    except TemplateStoreError as e:
        click.echo(f"❌ Error: {e.message}", err=True)
        raise SystemExit(1)

    if record is None:
        click.echo(f"❌ Template {template_id} not found", err=True)
        raise SystemExit(1)

    click.echo(f"Name:      {record.name}")
    click.echo(f"Subject:   {record.subject}")
    if record.preheader:
        click.echo(f"Preheader: {record.preheader}")
    click.echo(f"Tags:      {', '.join(record.tags) or '-'}")
    click.echo(f"Status:    {record.status.value}")
    click.echo(f"Updated:   {record.updated_at.isoformat()}")
    preview = decode_thumbnail(record.thumbnail) if record.thumbnail else None
    if preview:
        click.echo(f"Preview:   {preview}")

    if versions:
        click.echo(f"\nVersions ({len(record.versions)}):")
        for version in record.versions:
            click.echo(f"  {version.id}  {version.created_at.isoformat()}")


@cli.command()
@click.option("--id", "template_id", help="Existing template id; omit to create")
@click.option("--name", required=True, help="Template name")
@click.option("--subject", required=True, help="Email subject")
@click.option("--preheader", help="Email preheader")
@click.option("--tag", "tags", multiple=True, help="Tag (repeatable)")
@click.option("--design-file", type=click.Path(exists=True, dir_okay=False), required=True, help="JSON design document")
@click.option("--html-file", type=click.Path(exists=True, dir_okay=False), help="Rendered HTML")
def save(template_id, name, subject, preheader, tags, design_file, html_file):
    """Save a template version."""
    try:
        design = json.loads(Path(design_file).read_text(encoding="utf-8"))
    except ValueError as e:
        click.echo(f"❌ Invalid design file: {e}", err=True)
        raise SystemExit(1)

    html = Path(html_file).read_text(encoding="utf-8") if html_file else None
    payload = SaveTemplateInput(
        id=template_id,
        name=name,
        subject=subject,
        preheader=preheader,
        tags=list(tags),
        design=design,
        html=html,
    )
    try:
        record = _run(get_templates_backend().save(payload))
    except TemplateStoreError as e:
        click.echo(f"❌ Error: {e.message}", err=True)
        raise SystemExit(1)

    click.echo(f"✅ Saved {record.name} (ID: {record.id}, {len(record.versions)} versions)")


@cli.command()
@click.argument("template_id")
@click.option("--name", help="New name")
@click.option("--subject", help="New subject")
@click.option("--preheader", help="New preheader")
@click.option("--tag", "tags", multiple=True, help="Replace tags (repeatable)")
@click.option("--status", type=click.Choice([s.value for s in TemplateStatus], case_sensitive=False))
def meta(template_id, name, subject, preheader, tags, status):
    """Update template metadata without creating a version."""
    fields = {
        "name": name,
        "subject": subject,
        "preheader": preheader,
        "tags": list(tags) if tags else None,
        "status": TemplateStatus(status.upper()) if status else None,
    }
    payload = UpdateTemplateMetaInput(
        id=template_id,
        **{key: value for key, value in fields.items() if value is not None},
    )
    try:
        record = _run(get_templates_backend().update_meta(payload))
    except TemplateStoreError as e:
        click.echo(f"❌ Error: {e.message}", err=True)
        raise SystemExit(1)

    if record is None:
        click.echo(f"❌ Template {template_id} not found", err=True)
        raise SystemExit(1)
    click.echo(f"✅ Updated {record.name} (ID: {record.id})")


@cli.command()
@click.argument("template_id")
@click.confirmation_option(prompt="Are you sure you want to delete this template?")
def delete(template_id):
    """Delete a template."""
    _run(get_templates_backend().remove(template_id))
    click.echo(f"✅ Deleted {template_id}")


@cli.command()
@click.argument("template_id")
def clone(template_id):
    """Clone a template."""
    record = _run(get_templates_backend().clone(template_id))
    if record is None:
        click.echo(f"❌ Could not clone {template_id}", err=True)
        raise SystemExit(1)
    click.echo(f"✅ Cloned into {record.name} (ID: {record.id})")


@cli.command("send-test")
@click.argument("template_id")
@click.argument("email")
def send_test(template_id, email):
    """Send a test email for a template."""
    result = _run(get_templates_backend().send_test(template_id, email))
    _echo_json(result.model_dump())


@cli.command()
@click.option("--host", default="0.0.0.0", help="Bind address")
@click.option("--port", default=8009, help="Port")
def serve(host, port):
    """Run the template API server."""
    import uvicorn

    uvicorn.run("template_store.main:app", host=host, port=port, reload=settings.debug)


if __name__ == "__main__":
    cli()
