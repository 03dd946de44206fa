from fastapi import APIRouter

from storefront.api.v1.routers import checkout as checkout_router
from storefront.api.v1.routers import coupons as coupons_router
from storefront.api.v1.routers import loyalty as loyalty_router
from storefront.api.v1.routers import orders as orders_router
from storefront.api.v1.routers import admin_coupons as admin_coupons_router
from storefront.api.v1.routers import admin_orders as admin_orders_router
from storefront.api.v1.routers import admin_reports as admin_reports_router

router = APIRouter()

# public/customer routes
router.include_router(checkout_router.router)
router.include_router(coupons_router.router)
router.include_router(loyalty_router.router)
router.include_router(orders_router.router)

# admin routes
router.include_router(admin_coupons_router.router)
router.include_router(admin_orders_router.router)
router.include_router(admin_reports_router.router)
