"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from invoiceflow.application.dto.requests import (
    CreateProductRequest,
    InvoiceRequest,
    PurchaseItemRequest,
    PurchaseRequest,
    RecomputeRatesRequest,
    SaleItemRequest,
    UpdatePartyRequest,
    UpdateProductRequest,
    UpsertPartyRequest,
)
from invoiceflow.application.dto.responses import (
    DocumentPdfResponse,
    ErrorResponse,
    HealthResponse,
    InventorySnapshotResponse,
    InvoiceListResponse,
    InvoiceResponse,
    PartyListResponse,
    PartyResponse,
    ProductListResponse,
    ProductResponse,
    ProductSalesResponse,
    PurchaseListResponse,
    PurchaseResponse,
    RateLineResponse,
    SalesSummaryResponse,
    SyncBackupResponse,
)

__all__ = [
    # Requests
    "CreateProductRequest",
    "UpdateProductRequest",
    "SaleItemRequest",
    "InvoiceRequest",
    "PurchaseItemRequest",
    "PurchaseRequest",
    "RecomputeRatesRequest",
    "UpsertPartyRequest",
    "UpdatePartyRequest",
    # Responses
    "ProductResponse",
    "ProductListResponse",
    "InvoiceResponse",
    "InvoiceListResponse",
    "PurchaseResponse",
    "PurchaseListResponse",
    "RateLineResponse",
    "PartyResponse",
    "PartyListResponse",
    "ProductSalesResponse",
    "SalesSummaryResponse",
    "InventorySnapshotResponse",
    "DocumentPdfResponse",
    "SyncBackupResponse",
    "HealthResponse",
    "ErrorResponse",
]
