"""FastAPI application for PAY by square payload generation."""
from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse, Response

from .config import settings
from .logging_conf import configure_logging
from .middleware import RequestLoggingMiddleware, route_path
from .models import Payment
from .monitoring import metrics_payload, record_service_error
from .renderer import MEDIA_TYPES, render_qr_payload
from .schemas import EncodeRequest, EncodeResponse, HealthResponse, PaymentRequest, QRImageFormat
from .services.errors import ServiceError, err_bad_payload
from .services.generator import PayBySquareGenerator

app = FastAPI(title="paybysquare", version="0.1.0")
app.add_middleware(RequestLoggingMiddleware)

logger = logging.getLogger("paybysquare.api")


@lru_cache(maxsize=1)
def get_generator() -> PayBySquareGenerator:
    return PayBySquareGenerator()


def _warn_insecure_defaults() -> None:
    if settings.api_key == "dev-secret-key":
        logger.warning("api key is using the default value", extra={"config_key": "api_key"})


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging()
    _warn_insecure_defaults()
    logger.info(
        "encoder configured",
        extra={"backend": settings.compression_backend, "xz_path": settings.xz_path},
    )


async def require_api_key(x_api_key: str = Header(...)) -> None:
    if x_api_key != settings.api_key:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")


def _to_payment(request: PaymentRequest) -> Payment:
    try:
        return request.to_payment()
    except ValueError as exc:
        raise err_bad_payload(str(exc)) from exc


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    path = route_path(request)
    logger.warning("service error", extra={"code": exc.code, "path": path, "method": request.method})
    record_service_error(exc.code, path)
    return JSONResponse(status_code=exc.status_code, content={"code": exc.code, "message": exc.message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled exception", extra={"path": route_path(request), "method": request.method})
    return JSONResponse(status_code=500, content={"code": "ERR_INTERNAL", "message": "Internal server error"})


@app.get("/health", response_model=HealthResponse, tags=["system"])
async def health() -> HealthResponse:
    return HealthResponse(backend=settings.compression_backend)


@app.get("/metrics", tags=["system"])
async def metrics() -> Response:
    payload, content_type = metrics_payload()
    return Response(content=payload, media_type=content_type)


@app.post("/v1/paybysquare", response_model=EncodeResponse, tags=["paybysquare"], dependencies=[Depends(require_api_key)])
def encode_payment(
    payload: EncodeRequest,
    generator: PayBySquareGenerator = Depends(get_generator),
) -> EncodeResponse:
    payment = _to_payment(payload)
    result = generator.generate(payment)
    encoded = result.encoded

    qr_png_base64 = None
    if payload.include_qr:
        qr_png_base64 = render_qr_payload(encoded.payload)["png_base64"]

    return EncodeResponse(
        payload=encoded.payload,
        checksum=encoded.checksum.hex(),
        raw_length=encoded.raw_length,
        compressed_length=encoded.compressed_length,
        record_length=result.record_length,
        payment=payment.to_dict(),
        qr_png_base64=qr_png_base64,
    )


@app.post("/v1/paybysquare/qr", tags=["paybysquare"], dependencies=[Depends(require_api_key)])
def payment_qr_image(
    payload: PaymentRequest,
    fmt: QRImageFormat = Query(default=QRImageFormat.PNG, alias="format"),
    generator: PayBySquareGenerator = Depends(get_generator),
) -> Response:
    image = generator.generate_qr_code(_to_payment(payload), fmt.value)
    return Response(content=image, media_type=MEDIA_TYPES[fmt.value])
