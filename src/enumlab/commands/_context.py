"""AppContext — the object every command receives through ``@click.pass_obj``.

Built once by the root group. Sets up logging and telemetry from the
resolved settings and owns the stdout/stderr and exit-code routing of
service results.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from enumlab.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from enumlab.config.settings import EnumlabSettings
    from enumlab.services.result import ServiceResult


class AppContext:
    """Shared state for one CLI invocation."""

    def __init__(self, settings: EnumlabSettings) -> None:
        self.settings = settings

        from enumlab.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from enumlab.services.telemetry import enable_telemetry

            enable_telemetry()

    def emit(self, result: ServiceResult) -> None:
        """Print *result* and set the exit status.

        * Success: output on stdout; warnings on stderr unless ``--json``
          already carries them.
        * Failure: output on stderr, then exit code 1.
        """
        out = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
            width=self.settings.output.width,
        )
        text = format_result(result, settings=out)
        if not result.ok:
            click.echo(text, err=True)
            raise SystemExit(1)

        click.echo(text)
        if not out.json_output:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
