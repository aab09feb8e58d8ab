from contextlib import asynccontextmanager
from typing import Optional
import logging

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Load environment variables as early as possible
load_dotenv()

from .application.ports.store_client import StoreClient
from .application.repositories import AppointmentRepository, DoctorRepository, PatientRepository
from .application.services.deletion import DeletionProtocol
from .core.config import settings
from .database import create_db_and_tables, engine
from .exceptions import DashboardError, create_error_response, dashboard_exception_handler, http_exception_handler
from .infrastructure.store.sql_store_client import SqlStoreClient
from .middleware import ErrorHandlingMiddleware, LoggingMiddleware
from .routers import appointments_router, doctors_router, patients_router
from .utils import utcnow

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format=settings.LOG_FORMAT
)
logger = logging.getLogger(__name__)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = {".".join(str(p) for p in err["loc"]): err["msg"] for err in exc.errors()}
    return JSONResponse(
        status_code=422,
        content=create_error_response("Missing or invalid fields", fields)
    )


def create_app(store_client: Optional[StoreClient] = None) -> FastAPI:
    """Build the API. Without a store client the SQL store on the configured database is used."""
    use_sql = store_client is None

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {settings.APP_NAME}...")
        app.state.db_init_ok = True
        app.state.db_init_error = None
        if use_sql:
            try:
                create_db_and_tables()
                logger.info("Database initialized successfully")
            except Exception as e:
                # Do not crash the app; report via health endpoint
                app.state.db_init_ok = False
                app.state.db_init_error = str(e)
                logger.exception("Database initialization failed")
        yield
        logger.info(f"Shutting down {settings.APP_NAME}...")

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
        docs_url=("/docs" if settings.DOCS_ENABLED else None),
        redoc_url=("/redoc" if settings.DOCS_ENABLED else None),
        openapi_url=("/openapi.json" if settings.DOCS_ENABLED else None)
    )

    client = store_client or SqlStoreClient(engine)
    app.state.store_client = client
    app.state.deletions = {
        "doctors": DeletionProtocol(DoctorRepository(client), "Doctor"),
        "patients": DeletionProtocol(PatientRepository(client), "Patient"),
        "appointments": DeletionProtocol(AppointmentRepository(client), "Appointment"),
    }

    app.add_exception_handler(DashboardError, dashboard_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(doctors_router.router)
    app.include_router(patients_router.router)
    app.include_router(appointments_router.router)

    @app.get("/health")
    def health_check():
        return {
            "status": "healthy" if getattr(app.state, "db_init_ok", True) else "degraded",
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "timestamp": utcnow().isoformat(),
            "store": type(client).__name__,
            "db_error": getattr(app.state, "db_init_error", None),
        }

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "hospital_dashboard.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower()
    )
