import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import Settings, settings as default_settings
from database import Database
from routers import launches

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = "Todos os campos são obrigatórios: description, amount, date, type"
INVALID_ID = "ID inválido. Deve ser um número."
PERIOD_REQUIRED = "Ano e mês são obrigatórios"
INVALID_BODY = "Corpo da requisição inválido"


def validation_message(errors) -> str:
    """Pick the client facing message for a list of pydantic errors."""
    locations = {error["loc"][0] for error in errors if error.get("loc")}

    if "path" in locations:
        return INVALID_ID
    if "query" in locations:
        return PERIOD_REQUIRED

    for error in errors:
        if error["type"] in ("missing", "string_too_short") or error.get("input") in ("", None):
            return REQUIRED_FIELDS

    # malformed JSON or a non-object body has no field names
    fields = sorted({
        error["loc"][-1] for error in errors
        if len(error.get("loc", ())) > 1 and isinstance(error["loc"][-1], str)
    })
    if not fields:
        return INVALID_BODY
    return "Campos inválidos: " + ", ".join(fields)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    message = validation_message(exc.errors())
    logger.warning("%s %s rejected: %s", request.method, request.url.path, message)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": message}
    )


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.LOG_LEVEL)
        database = Database(settings.DATABASE_URL, echo=settings.SQL_ECHO)
        app.state.database = database.open(create_schema=settings.DB_AUTO_CREATE)
        logger.info("Starting ContAI API...")
        try:
            yield
        finally:
            database.close()
            logger.info("Shutting down ContAI API...")

    app = FastAPI(
        title="ContAI API",
        description="Lançamentos contábeis: créditos, débitos e resumo mensal",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.include_router(launches.router, prefix="/launches", tags=["launches"])

    @app.get("/")
    def root():
        return {"message": "ContAI API running"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=default_settings.HOST, port=default_settings.PORT)
