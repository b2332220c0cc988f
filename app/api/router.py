from fastapi import APIRouter
from app.modules.residents.router import router as residents_router
from app.modules.medical_records.router import router as medical_records_router

api_router = APIRouter()
api_router.include_router(residents_router, prefix="/residents", tags=["residents"])
api_router.include_router(medical_records_router, tags=["medical-records"])
# medical_records_router carries both /residents/{id}/medical-records and /medical-records/{id}

@api_router.get("/health", tags=["health"])
async def health():
    return {"status": "ok"}
