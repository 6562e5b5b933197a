"""InvoiceFlow: point-of-sale and inventory ledger service."""

__version__ = "1.0.0"
