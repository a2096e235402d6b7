# fifo_inventory/api/v1/router.py

from fastapi import APIRouter
from fifo_inventory.api.v1.products import router as products_router
from fifo_inventory.api.v1.lots import router as lots_router
from fifo_inventory.api.v1.withdrawals import router as withdrawals_router
from fifo_inventory.api.v1.transactions import router as transactions_router
from fifo_inventory.api.v1.reports import router as reports_router

# Create a main router for API version 1
router = APIRouter()

# Include individual routers for v1 endpoints, applying tags here for clarity
router.include_router(products_router, tags=["Products"])
router.include_router(lots_router, tags=["Lots"])
router.include_router(withdrawals_router, tags=["Withdrawals"])
router.include_router(transactions_router, tags=["Transactions"])
router.include_router(reports_router, tags=["Reports"])
