from fastapi import FastAPI

from quiz_app.errors import register_exception_handlers
from quiz_app.helpers.rate_limiter import FixedWindowRateLimiter
from quiz_app.logging_config import configure_logging
from quiz_app.middleware import install_middleware

from quiz_app.routes.auth import router as auth_router

from quiz_app.routes.admin.quiz import router as admin_quiz_router

from quiz_app.routes.public.quiz import router as public_quiz_router
from quiz_app.routes.public.attempt import router as public_attempt_router


configure_logging()

app = FastAPI(
    title="Quiz Management System"
)

app.state.rate_limiter = FixedWindowRateLimiter()

register_exception_handlers(app)
install_middleware(app)


@app.get("/")
def root():
    return {
        "message": "Quiz Management System is Running!"
        }


app.include_router(auth_router)

app.include_router(admin_quiz_router)

app.include_router(public_quiz_router)
app.include_router(public_attempt_router)
