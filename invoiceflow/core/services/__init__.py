"""
Core business logic services.

Layer-pure services that depend only on:
- invoiceflow/core/entities/*
- invoiceflow/core/interfaces/*
- invoiceflow/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from invoiceflow.core.services.directory import DirectoryResolver, DirectoryService
from invoiceflow.core.services.document_lifecycle import DocumentLifecycleManager
from invoiceflow.core.services.inventory_service import InventoryService
from invoiceflow.core.services.pricing import (
    DocumentTotals,
    LineBreakdown,
    aggregate_lines,
    decompose_line,
    invoice_totals,
    line_profit,
    round_money,
)
from invoiceflow.core.services.purchase_rates import RateField, RateLine, recompute
from invoiceflow.core.services.reporting import (
    InventorySnapshot,
    ReportingAggregator,
    SalesSummary,
    inventory_snapshot,
    summarize,
)
from invoiceflow.core.services.stock_ledger import (
    StockLedger,
    net_change,
    purchase_deltas,
    sale_deltas,
)

__all__ = [
    # Pricing
    "LineBreakdown",
    "DocumentTotals",
    "decompose_line",
    "aggregate_lines",
    "invoice_totals",
    "line_profit",
    "round_money",
    # Purchase rates
    "RateField",
    "RateLine",
    "recompute",
    # Stock ledger
    "StockLedger",
    "sale_deltas",
    "purchase_deltas",
    "net_change",
    # Documents
    "DocumentLifecycleManager",
    # Directory
    "DirectoryResolver",
    "DirectoryService",
    # Inventory
    "InventoryService",
    # Reporting
    "ReportingAggregator",
    "SalesSummary",
    "InventorySnapshot",
    "summarize",
    "inventory_snapshot",
]
