"""Address and mail field validation exports."""

from .email_addresses import AddressValidator, EmailAddressValidator
from .mail_validator import MailValidator

__all__ = ["AddressValidator", "EmailAddressValidator", "MailValidator"]
