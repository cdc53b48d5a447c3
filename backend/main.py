import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.exc import SQLAlchemyError

from backend.core import config
from backend.core.errors import AppointmentError
from backend.database import Base, engine, ensure_appointment_schema
from backend.models import appointment, file, notification, user  # noqa: F401
from backend.routes import (
    appointment_routes,
    auth_routes,
    availability_routes,
    file_routes,
    notification_routes,
    provider_routes,
)

config.configure_logging()
config.validate_runtime_config()

app = FastAPI()

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

logger = logging.getLogger(__name__)


@app.on_event('startup')
def initialize_database() -> None:
    try:
        Base.metadata.create_all(bind=engine)
        ensure_appointment_schema()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')


@app.exception_handler(AppointmentError)
async def appointment_error_handler(request: Request, exc: AppointmentError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={'error': exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={'error': exc.detail}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = 'Validation failed.'
    if errors:
        message = str(errors[0].get('msg', message)).removeprefix('Value error, ')
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={'error': message})


@app.get('/')
def root():
    return {'status': 'Appointments API Running'}


app.include_router(auth_routes.router)
app.include_router(provider_routes.router)
app.include_router(availability_routes.router)
app.include_router(file_routes.router)
app.include_router(appointment_routes.router)
app.include_router(notification_routes.router)
app.mount('/files', StaticFiles(directory=config.UPLOAD_DIR, check_dir=False), name='files')
