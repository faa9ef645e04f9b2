"""Mail dispatch exports."""

from .attachment_reading import FileReader, LocalFileReader, load_attachment
from .delivery_receipt import DeliveryReceipt
from .mail_dispatcher import MailDispatcher, TransportFactory

__all__ = [
    "FileReader",
    "LocalFileReader",
    "load_attachment",
    "DeliveryReceipt",
    "MailDispatcher",
    "TransportFactory",
]
