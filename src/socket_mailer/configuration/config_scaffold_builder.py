"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

from socket_mailer.address_validation.mail_validator import DEFAULT_SUBJECT_LENGTH

DEFAULT_CONFIG_FILENAME = "mail.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = f"""# Mail delivery configuration for socket-mailer.
# Replace every <REQUIRED> placeholder before running send.
# Replace or remove <OPTIONAL> placeholders depending on your server.

smtp:
  host: "<REQUIRED>"
  # 465 for implicit TLS (use_ssl: true), 25 or 2525 for plain connections.
  port: 465
  # AUTH LOGIN is always performed, so both credentials are required.
  username: "<REQUIRED>"
  password: "<REQUIRED>"
  use_ssl: true
  # Applies to connecting and to every server reply.
  timeout_seconds: 30
  # Name announced in EHLO/HELO; defaults to this machine's FQDN.
  # local_hostname: "<OPTIONAL>"

mail:
  charset: utf-8
  # Remove to allow subjects of any length.
  subject_length: {DEFAULT_SUBJECT_LENGTH}
  # Sender used when send is called without --from-email.
  from:
    name: "<OPTIONAL>"
    email: "<REQUIRED>"
"""


def build_placeholder_configuration() -> str:
    """Build a YAML configuration template with placeholders and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
