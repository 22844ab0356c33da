from fastapi import APIRouter

from supplychain.app.api.v1.endpoints.health import router as health_router
from supplychain.app.api.v1.endpoints.suppliers import router as suppliers_router
from supplychain.app.api.v1.endpoints.raw_materials import router as raw_materials_router
from supplychain.app.api.v1.endpoints.supply_orders import router as supply_orders_router
from supplychain.app.api.v1.endpoints.products import router as products_router
from supplychain.app.api.v1.endpoints.bill_of_materials import router as bill_of_materials_router
from supplychain.app.api.v1.endpoints.production_orders import router as production_orders_router
from supplychain.app.api.v1.endpoints.customers import router as customers_router
from supplychain.app.api.v1.endpoints.customer_orders import router as customer_orders_router
from supplychain.app.api.v1.endpoints.deliveries import router as deliveries_router
from supplychain.app.api.v1.endpoints.users import router as users_router
from supplychain.app.api.v1.endpoints.scheduler import router as scheduler_router

router = APIRouter()
router.include_router(health_router, tags=["health"])
router.include_router(suppliers_router, tags=["suppliers"])
router.include_router(raw_materials_router, tags=["raw_materials"])
router.include_router(supply_orders_router, tags=["supply_orders"])
router.include_router(products_router, tags=["products"])
router.include_router(bill_of_materials_router, tags=["bill_of_materials"])
router.include_router(production_orders_router, tags=["production_orders"])
router.include_router(customers_router, tags=["customers"])
router.include_router(customer_orders_router, tags=["customer_orders"])
router.include_router(deliveries_router, tags=["deliveries"])
router.include_router(users_router, tags=["users"])
router.include_router(scheduler_router, tags=["scheduler"])
