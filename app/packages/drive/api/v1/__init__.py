"""API v1 汇总路由：统一挂载所有版本化的子路由。"""

from fastapi import APIRouter

from app.packages.drive.api.v1.endpoints import auth, bulk, folders, logs, reports

api_router = APIRouter()
api_router.include_router(auth.router)
api_router.include_router(folders.router)
api_router.include_router(reports.router)
api_router.include_router(bulk.router)
api_router.include_router(logs.router)
