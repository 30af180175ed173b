from typing import Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import configure_logging, load_settings
from .models import PayerDelta, SpendRequest, Transaction, TransactionHistoryResponse
from .service import InsufficientPointsError, InvalidInputError, PointsService


def create_app(service: Optional[PointsService] = None, **fastapi_kwargs) -> FastAPI:
    if service is None:
        settings = load_settings()
        configure_logging(settings.log_level)
        service = PointsService(spend_mode=settings.spend_mode)

    app = FastAPI(
        title="Points Ledger API",
        description="Payer point grants with oldest-first spending that never drives a payer negative",
        version="1.0.0",
        **fastapi_kwargs,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.points_service = service

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": jsonable_errors(exc)},
        )

    @app.get("/health", tags=["System"])
    def health_check():
        return {"status": "healthy", "service": "points-ledger"}

    @app.get("/points", response_model=dict[str, int], tags=["Points"])
    def get_points() -> dict[str, int]:
        return service.balances()

    @app.post("/add", tags=["Points"])
    def add_transaction(transaction: Transaction) -> str:
        service.add_transaction(transaction)
        return "Transaction added successfully"

    @app.post("/spend", response_model=list[PayerDelta], tags=["Points"])
    def spend_points(request: SpendRequest) -> list[PayerDelta]:
        try:
            return service.spend(request.points)
        except InsufficientPointsError as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={
                    "message": str(e),
                    "requested": e.requested,
                    "available": e.available,
                    "shortfall": e.shortfall,
                },
            )
        except InvalidInputError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    @app.get("/transactions", response_model=TransactionHistoryResponse, tags=["Points"])
    def get_transactions(payer: Optional[str] = None, limit: int = 50, offset: int = 0) -> TransactionHistoryResponse:
        if limit < 0 or offset < 0:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="limit and offset must be non-negative")
        return service.history(payer, limit, offset)

    return app


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]


_app: Optional[FastAPI] = None


def get_app() -> FastAPI:
    global _app
    if _app is None:
        _app = create_app()
    return _app


def __getattr__(name):
    # `uvicorn points.api:app` builds the default app on first access only.
    if name == "app":
        return get_app()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


if __name__ == "__main__":
    import uvicorn
    settings = load_settings()
    uvicorn.run(get_app(), host=settings.host, port=settings.port)
