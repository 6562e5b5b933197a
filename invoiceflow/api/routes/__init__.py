"""API route modules."""

from invoiceflow.api.routes.directory import customers_router, suppliers_router
from invoiceflow.api.routes.health import router as health_router
from invoiceflow.api.routes.invoices import router as invoices_router
from invoiceflow.api.routes.products import router as products_router
from invoiceflow.api.routes.purchases import router as purchases_router
from invoiceflow.api.routes.reports import router as reports_router

__all__ = [
    "health_router",
    "products_router",
    "invoices_router",
    "purchases_router",
    "customers_router",
    "suppliers_router",
    "reports_router",
]
