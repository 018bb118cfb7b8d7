"""
API router aggregator — wires all endpoint modules together.
"""

from fastapi import APIRouter

from pesagem.api.v1.endpoints import auth, reports, users, weight_records

api_router = APIRouter()

# Login, logout, current user
api_router.include_router(auth.router)

# User management and per-user summary
api_router.include_router(users.router)

# Weight entry, record listing, daily / monthly stats
api_router.include_router(weight_records.router)

# Dashboard, health
api_router.include_router(reports.router)
