from fastapi import APIRouter

from classhub.modules.auth.router import router as auth_router
from classhub.modules.classrooms.router import router as classrooms_router
from classhub.modules.join_requests.router import router as join_requests_router
from classhub.modules.lectures.router import router as lectures_router
from classhub.modules.profile.router import router as profile_router
from classhub.modules.quizzes.router import router as quizzes_router
from classhub.modules.users.router import router as users_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])

api_router.include_router(profile_router, prefix="/profile", tags=["Profile"])

api_router.include_router(users_router, prefix="/users", tags=["Admin - Users"])

api_router.include_router(classrooms_router, prefix="/classrooms", tags=["Admin - Classrooms"])

api_router.include_router(join_requests_router, prefix="/join-requests", tags=["Join Requests"])

api_router.include_router(lectures_router, prefix="/lectures", tags=["Lectures"])

api_router.include_router(quizzes_router, prefix="/quizzes", tags=["Admin - Quizzes"])
