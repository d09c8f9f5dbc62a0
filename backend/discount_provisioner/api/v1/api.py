from fastapi import APIRouter
from discount_provisioner.api.v1.endpoints import discounts

api_router = APIRouter()
api_router.include_router(discounts.router, prefix="/discounts", tags=["discounts"])
