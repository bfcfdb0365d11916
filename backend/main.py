import logging
from typing import Any, Optional

import uvicorn
from fastapi import Body, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.config import Settings, load_settings
from backend.errors import MethodNotAllowed, PredictionError, ValidationError
from backend.pipeline import PredictionPipeline
from data.models import PredictionResponse
from data.validation import describe_error


logger = logging.getLogger(__name__)

PREDICT_PATHS = ("/predict", "/api/predict")


async def handle_prediction_error(request: Request, exc: PredictionError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.warning("prediction failed on %s: %s (%s)", request.url.path, exc.message, exc.details)
    return JSONResponse(exc.to_dict(), status_code=exc.status_code)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors and errors[0].get("type") == "json_invalid":
        error = ValidationError("request body must be valid JSON")
    else:
        error = ValidationError(describe_error(errors[0]) if errors else "invalid request")
    return JSONResponse(error.to_dict(), status_code=error.status_code)


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 405:
        return JSONResponse(MethodNotAllowed().to_dict(), status_code=405, headers=exc.headers)
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=exc.headers)


def create_app(settings: Optional[Settings] = None, pipeline: Optional[PredictionPipeline] = None) -> FastAPI:
    settings = settings or load_settings()
    pipeline = pipeline or PredictionPipeline(settings)

    app = FastAPI(title="Diabetes Risk Predictor", version="1.0")
    app.state.settings = settings
    app.state.pipeline = pipeline
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["POST", "GET", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_exception_handler(PredictionError, handle_prediction_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)

    # plain def: runs in the threadpool since the provider call blocks
    def predict(request: Request, body: Any = Body(None)) -> PredictionResponse:
        try:
            return request.app.state.pipeline.run({} if body is None else body, request.headers)
        except PredictionError:
            raise
        except Exception as exc:
            logger.exception("unexpected error while predicting")
            raise PredictionError("Prediction failed.", details=str(exc)) from exc

    for path in PREDICT_PATHS:
        app.add_api_route(path, predict, methods=["POST"], response_model=PredictionResponse)

    @app.get("/health")
    def health():
        return {"status": "ok", "default_mode": settings.default_mode.label}

    logger.info("Prediction mode default: %s", settings.default_mode.label.upper())
    return app


app = create_app()


def run() -> None:
    settings = app.state.settings
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Server running on port %d", settings.port)
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
