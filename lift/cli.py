# lift/cli.py
# =============================================================================
# Lift CLI
#   flask lift normalize page.html --context-path /app --strip-comments
# Prints the normalized markup, then the JavaScript that binds the
# extracted handlers.
# =============================================================================

from __future__ import annotations

import click
from flask import current_app
from flask.cli import AppGroup, with_appcontext

from lift.http.session import S
from lift.xml.parsing import parse_html, render

lift_cli = AppGroup("lift", help="Lift page pipeline tools.")


@lift_cli.command("normalize")
@click.argument("source", type=click.File("r", encoding="utf-8"))
@click.option("--context-path", default=None, help="Context path to rebase root-relative URLs on.")
@click.option(
    "--strip-comments/--keep-comments",
    default=None,
    help="Drop HTML comments (default: LIFT_STRIP_COMMENTS).",
)
@click.option(
    "--removed-events-attribute",
    default=None,
    help="Attribute that lists the handlers removed from each element.",
)
@click.option("--no-js", is_flag=True, help="Only print the markup.")
@with_appcontext
def normalize_cmd(source, context_path, strip_comments, removed_events_attribute, no_js) -> None:
    """Normalize an HTML file the way pages are normalized before sending."""
    s = S.for_app(current_app, context_path=context_path)
    if removed_events_attribute:
        s.config = {**s.config, "LIFT_REMOVED_EVENTS_ATTRIBUTE": removed_events_attribute}
    strip = s.strip_comments if strip_comments is None else strip_comments

    nodes, js = s.normalizer().normalize(parse_html(source.read()), s.context_path, strip)

    click.echo(render(nodes))
    if not no_js and js.commands:
        click.echo("")
        click.echo(js.to_js_cmd())
