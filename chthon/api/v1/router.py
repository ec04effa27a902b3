from fastapi import APIRouter
from chthon.api.v1 import health, auth, users, chat_sessions, chat, admin, upload
from chthon.core.config import settings

api_router = APIRouter(prefix=settings.API_V1_PREFIX)

api_router.include_router(health.router, tags=['health'])
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(chat_sessions.router)
api_router.include_router(chat.router)
api_router.include_router(admin.router)
api_router.include_router(upload.router)
