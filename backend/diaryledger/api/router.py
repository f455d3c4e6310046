"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from diaryledger.api.routes import (
    auth, users, diaries, diary_media, permissions,
    tags, account_books, account_book_users, bills
)

api_router = APIRouter()

# Include all route modules
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(diaries.router)
api_router.include_router(diary_media.router)
api_router.include_router(permissions.router)
api_router.include_router(tags.router)
api_router.include_router(account_books.router)
api_router.include_router(account_book_users.router)
api_router.include_router(bills.router)
