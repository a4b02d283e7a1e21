"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from gym_billing.api.middleware import RequestIDMiddleware, MetricsMiddleware
from gym_billing.api.v1 import members, payments, plan, renewal, schedule
from gym_billing.infrastructure.observability.logging import setup_logging
from gym_billing.config import settings

setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Gym Billing",
        description="Membership installment plans, payments and renewals",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Last added = first executed
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(schedule.router, prefix="/v1", tags=["installments"])
    app.include_router(plan.router, prefix="/v1", tags=["installment-plans"])
    app.include_router(payments.router, prefix="/v1", tags=["payments"])
    app.include_router(members.router, prefix="/v1", tags=["members"])
    app.include_router(renewal.router, prefix="/v1", tags=["renewals"])

    return app


app = create_app()
