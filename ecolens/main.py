# ecolens/main.py — FastAPI gateway for the EcoLens+ frontend
from __future__ import annotations
import logging
from functools import partial
from typing import Callable, List, Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .ai_router import PROBE_MODELS, AIService
from .calculator import calculate_footprint
from .challenges import challenge_payload
from .config import Settings, load_settings
from .integrations.barcode import resolve_barcode
from .prompts import (
    climate_education_prompt,
    companion_prompt,
    decode_image,
    footprint_advice_prompt,
    plant_mood,
    product_analysis_prompt,
)
from .schemas import (
    AdviceRequest,
    AwarenessRequest,
    EcoBloomRequest,
    EcoScanRequest,
    LifestyleInput,
    ProductRecord,
    SimulationRequest,
)
from .simulator import simulate_impact

logger = logging.getLogger(__name__)

Resolver = Callable[[str], ProductRecord]


def error_response(error: Exception | str, status_code: int = 500) -> JSONResponse:
    return JSONResponse({"success": False, "error": str(error)}, status_code=status_code)


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


class BodySizeLimit:
    """Reject request bodies over ``max_bytes`` with the 413 error envelope.

    A declared Content-Length is checked up front. Chunked bodies carry no
    length, so they are read and counted here, then replayed to the app.
    """

    def __init__(self, app, max_bytes: int):
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        length = dict(scope["headers"]).get(b"content-length")
        if length is not None:
            if length.isdigit() and int(length) > self.max_bytes:
                await self._reject(scope, receive, send)
                return
            await self.app(scope, receive, send)
            return

        messages = []
        size = 0
        while True:
            message = await receive()
            messages.append(message)
            if message["type"] != "http.request":
                break
            size += len(message.get("body", b""))
            if size > self.max_bytes:
                await self._reject(scope, receive, send)
                return
            if not message.get("more_body", False):
                break

        async def replay():
            if messages:
                return messages.pop(0)
            return await receive()

        await self.app(scope, replay, send)

    async def _reject(self, scope, receive, send):
        logger.info("[api] %s rejected: body over %s bytes", scope.get("path"), self.max_bytes)
        await error_response("Request entity too large", status_code=413)(scope, receive, send)


# ---- dependencies -----------------------------------------------------------
def get_ai(request: Request) -> AIService:
    return request.app.state.ai


def get_resolver(request: Request) -> Resolver:
    return request.app.state.resolver


# ---- app factory ------------------------------------------------------------
def create_app(
    settings: Optional[Settings] = None,
    ai: Optional[AIService] = None,
    resolver: Optional[Resolver] = None,
) -> FastAPI:
    settings = settings or load_settings()

    app = FastAPI(title="EcoLens+ API", version="1.0.0")
    app.state.settings = settings
    app.state.ai = ai or AIService(settings)
    app.state.resolver = resolver or partial(resolve_barcode, timeout=settings.barcode_timeout)

    # CORS added last so it wraps the 413 responses too
    app.add_middleware(BodySizeLimit, max_bytes=settings.max_body_bytes)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def on_invalid_request(request: Request, exc: RequestValidationError):
        logger.info("[api] %s rejected: %s", request.url.path, exc.errors())
        return error_response(_validation_message(exc))

    @app.exception_handler(Exception)
    async def on_unhandled(request: Request, exc: Exception):
        logger.error("[api] %s failed outside its handler: %r", request.url.path, exc)
        return error_response(exc)

    # ---- footprint ----------------------------------------------------------
    @app.post("/api/calculate-footprint")
    def calculate(payload: LifestyleInput):
        try:
            result = calculate_footprint(payload)
            return {"success": True, **result.model_dump()}
        except Exception as e:
            logger.exception("[api] Error calculating footprint")
            return error_response(e)

    @app.post("/api/ai-advice")
    def ai_advice(payload: AdviceRequest, ai: AIService = Depends(get_ai)):
        try:
            advice = ai.generate(footprint_advice_prompt(payload.footprint_data, payload.user_inputs))
            return {"success": True, "advice": advice}
        except Exception as e:
            logger.exception("[api] Error generating AI advice")
            return error_response(e)

    @app.post("/api/simulate-impact")
    def simulate(payload: SimulationRequest):
        try:
            sim = simulate_impact(payload.current_footprint, payload.improvements)
            return {"success": True, "simulation": sim.model_dump()}
        except Exception as e:
            logger.exception("[api] Error simulating impact")
            return error_response(e)

    # ---- AI product checker -------------------------------------------------
    @app.post("/api/ecoscan")
    def ecoscan(
        payload: EcoScanRequest,
        ai: AIService = Depends(get_ai),
        resolver: Resolver = Depends(get_resolver),
    ):
        try:
            product = None
            if payload.barcode:
                logger.info("[api] looking up barcode %s", payload.barcode)
                product = resolver(payload.barcode)
            image = decode_image(payload.image) if payload.image else None
            prompt = product_analysis_prompt(
                product_name=payload.product_name,
                description=payload.product_description,
                barcode=payload.barcode,
                product=product,
                image=image,
            )
            analysis = ai.generate(prompt)
            return {
                "success": True,
                "analysis": analysis,
                "productData": product.summary() if product and product.found else None,
            }
        except Exception as e:
            logger.exception("[api] Error in EcoScan")
            return error_response(e)

    # ---- plant companion ----------------------------------------------------
    @app.post("/api/ecobloom")
    def ecobloom(payload: EcoBloomRequest, ai: AIService = Depends(get_ai)):
        try:
            actions = payload.user_actions
            message = ai.generate(companion_prompt(payload.message_type, actions.last_action, actions.total_saved))
            return {
                "success": True,
                "message": message,
                "plantMood": plant_mood(actions.total_saved),
                "plantStage": payload.plant_data.stage or "seedling",
            }
        except Exception as e:
            logger.exception("[api] Error in EcoBloom")
            return error_response(e)

    @app.post("/api/awareness-chat")
    def awareness_chat(payload: AwarenessRequest, ai: AIService = Depends(get_ai)):
        try:
            return {"success": True, "answer": ai.generate(climate_education_prompt(payload.question))}
        except Exception as e:
            logger.exception("[api] Error in awareness chat")
            return error_response(e)

    # ---- static + meta ------------------------------------------------------
    @app.get("/api/challenges")
    def challenges():
        return {"success": True, "challenges": challenge_payload()}

    @app.get("/api/health")
    def health():
        return {"status": "ok", "message": "EcoLens+ API is running"}

    @app.get("/api/models")
    def models(ai: AIService = Depends(get_ai)):
        try:
            return {"success": True, "models": ai.list_models()}
        except Exception as e:
            logger.exception("[api] Error listing models")
            return error_response(e)

    # ---- debug endpoints ----------------------------------------------------
    @app.get("/debug/barcode")
    def debug_barcode(code: str = Query(...), resolver: Resolver = Depends(get_resolver)):
        """Full normalized record for one barcode, to check provider mapping."""
        return resolver(code).model_dump()

    @app.get("/debug/models/probe")
    def debug_probe(model: Optional[List[str]] = Query(None), ai: AIService = Depends(get_ai)):
        """Which chat models answer with the configured key."""
        try:
            return {"success": True, "results": ai.probe_models(model or PROBE_MODELS)}
        except Exception as e:
            return error_response(e)

    return app


def run() -> None:
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    settings = load_settings()
    logger.info("[api] EcoLens+ backend starting on port %s", settings.port)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
