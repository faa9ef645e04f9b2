"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from socket_mailer.configuration import (
    DEFAULT_CONFIG_FILENAME,
    ConfigurationError,
    load_configuration,
    write_placeholder_configuration,
)
from socket_mailer.delivery_failures import MailDeliveryError
from socket_mailer.mail_dispatch import MailDispatcher
from socket_mailer.message_composition import Sender


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="socket-mailer")
def cli() -> None:
    """Compose and deliver email over a raw SMTP connection."""


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML mail configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML mail configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="send")
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to YAML/JSON mail configuration file",
)
@click.option(
    "--to",
    "recipients",
    required=True,
    multiple=True,
    help="Recipient address; repeat for several recipients",
)
@click.option("--subject", required=True, help="Message subject")
@click.option("--body", required=False, help="Message body text")
@click.option(
    "--body-file",
    "body_file",
    required=False,
    type=click.Path(path_type=str, dir_okay=False),
    help="Read the message body from this file instead of --body",
)
@click.option(
    "--attach",
    "attachments",
    multiple=True,
    type=click.Path(path_type=str),
    help="File to attach; repeat for several attachments",
)
@click.option("--from-email", "from_email", required=False, help="Override the default sender")
@click.option("--from-name", "from_name", required=False, help="Display name for --from-email")
@click.option("--verbose", is_flag=True, default=False, help="Log the SMTP dialog to stderr.")
def send(  # pylint: disable=too-many-arguments
    config_path: str,
    recipients: tuple[str, ...],
    subject: str,
    body: str | None,
    body_file: str | None,
    attachments: tuple[str, ...],
    from_email: str | None,
    from_name: str | None,
    verbose: bool,
) -> None:
    """Send one message, optionally with attachments."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    text = _resolve_body(body, body_file)
    sender = Sender(email=from_email, name=from_name) if from_email else None
    try:
        configuration = load_configuration(config_path)
        dispatcher = MailDispatcher(configuration.smtp, configuration.mail)
        receipt = (
            dispatcher.configure(recipients, sender)
            .set_subject(subject)
            .set_body(text)
            .add_attachments(attachments)
            .send()
        )
    except ConfigurationError as exc:
        raise CliError(f"configuration error: {exc}") from exc
    except MailDeliveryError as exc:
        raise CliError(f"{exc.kind} error: {exc}") from exc
    click.echo(receipt.server_reply)


def _resolve_body(body: str | None, body_file: str | None) -> str:
    if body is not None and body_file is not None:
        raise click.UsageError("Use either --body or --body-file, not both.")
    if body_file is not None:
        try:
            return Path(body_file).read_text(encoding="utf-8")
        except OSError as exc:
            raise CliError(f"Cannot read body file: {exc}") from exc
    if body is None:
        raise click.UsageError("One of --body or --body-file is required.")
    return body


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
