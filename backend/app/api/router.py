from fastapi import APIRouter
from app.api.routes import analysis

api_router = APIRouter()

api_router.include_router(analysis.router, prefix="/vcf", tags=["Analysis"])
