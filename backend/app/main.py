from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import settings
from core.exceptions import register_exception_handlers
from app.startup import configure_startup_logging, run_startup_checks

# ========== Authentication & Users ==========
from modules.auth.routes.auth_routes import router as auth_router
from modules.auth.routes.user_admin_routes import router as user_admin_router

# ========== Businesses ==========
from modules.businesses.routes.business_routes import router as business_router
from modules.businesses.routes.admin_business_routes import router as admin_business_router

# ========== Reviews & Feedback ==========
from modules.feedback.routers.reviews_router import (
    router as reviews_router,
    business_reviews_router,
)
from modules.feedback.routers.feedback_router import (
    router as feedback_router,
    review_feedback_router,
)
from modules.feedback.routers.admin_router import (
    reviews_router as admin_reviews_router,
    feedback_router as admin_feedback_router,
    maintenance_router as admin_maintenance_router,
)

configure_startup_logging()

app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description="""
    Customer review platform.

    Customers rate businesses. Ratings of 4 or 5 are sent on to the
    business's Google review page; ratings of 3 or below get a private
    feedback form instead. Business owners and admins manage profiles,
    reviews and feedback through the `/admin` endpoints.

    ## Authentication

    Sign-in happens at the OAuth2 gateway, which exchanges the verified
    identity for a bearer token at `POST /auth/session`. Send it as
    `Authorization: Bearer <token>`.
    """,
    version="1.0.0",
)

# Register exception handlers for consistent error responses
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ========== Include routers ==========

# Authentication & Users
app.include_router(auth_router)
app.include_router(user_admin_router)

# Businesses
app.include_router(business_router)
app.include_router(business_reviews_router)
app.include_router(admin_business_router)

# Reviews & Feedback
app.include_router(reviews_router)
app.include_router(review_feedback_router)
app.include_router(feedback_router)
app.include_router(admin_reviews_router)
app.include_router(admin_feedback_router)
app.include_router(admin_maintenance_router)


@app.on_event("startup")
async def startup_event():
    """Validate configuration before serving"""
    run_startup_checks()


@app.get("/health", tags=["Health"])
async def health_check():
    return {"status": "ok", "app": settings.APP_NAME, "environment": settings.ENVIRONMENT}
