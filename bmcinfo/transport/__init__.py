"""Transports that execute CLP commands on the controller."""

from bmcinfo.transport.base import BaseTransport
from bmcinfo.transport.ssh import SMASHCLPTransport

__all__ = ["BaseTransport", "SMASHCLPTransport"]
