"""Config commands -- view and persist extraction settings.

Provides the ``specsubset config`` sub-command group. ``show`` prints the
effective :class:`~specsubset.models.ExtractionOptions` after applying the
full precedence chain; ``init`` writes them to a project-local
``specsubset.json`` so the settings can be committed next to the spec.
"""

from __future__ import annotations

import typer

from specsubset.exceptions import SpecsubsetError
from specsubset.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the effective extraction settings.

    Example::

        specsubset config show
        specsubset --json config show
    """
    from specsubset.config import project_config_path, resolve_options, user_config_path

    try:
        options = resolve_options()
    except SpecsubsetError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    info(f"User config: {user_config_path()}")
    info(f"Project config: {project_config_path()}")
    format_response(options.model_dump(mode="json"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(
        False, "--force", help="Overwrite an existing specsubset.json."
    ),
) -> None:
    """Write the effective settings to ./specsubset.json.

    Example::

        SPECSUBSET_PATH_MARKER=/public/ specsubset config init
    """
    from specsubset.config import resolve_options, save_project_config

    try:
        path = save_project_config(resolve_options(), force=force)
    except SpecsubsetError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    success(f"Wrote {path}")
