# routers/__init__.py
from .leases import router as leases_router
from .tenants import router as tenants_router
from .landlords import router as landlords_router
from .payments import router as payments_router

__all__ = [
     "leases_router",
     "tenants_router",
     "landlords_router",
     "payments_router",
]
