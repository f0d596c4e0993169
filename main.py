from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from hysio.api import router as api_router
from hysio.performance import PerformanceMonitor
from hysio.session_store import SessionStore
import logging
import os

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("hysio")


def _cors_origins():
    raw = os.getenv("HYSIO_CORS_ORIGINS", "*")
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or ["*"]


def create_app(llm_client=None) -> FastAPI:
    app = FastAPI(
        title="Hysio",
        version="0.1.0"
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Per-app state; tests build their own app with fresh instances.
    app.state.session_store = SessionStore()
    app.state.performance_monitor = PerformanceMonitor()
    app.state.llm_client = llm_client

    @app.get("/ping")
    def ping():
        return {"status": "ok"}

    @app.on_event("startup")
    def startup_event():
        logger.info("Hysio backend started (sessions: in-memory)")
        if not os.getenv("OPENAI_API_KEY") and llm_client is None:
            logger.warning("OPENAI_API_KEY not set; anamnesis generation will fail")

    @app.on_event("shutdown")
    def shutdown_event():
        logger.info("Hysio backend stopped (%d sessions discarded)", len(app.state.session_store))

    app.include_router(api_router, prefix="/api")
    return app


app = create_app()


def main():
    import uvicorn

    port = int(os.getenv("HYSIO_PORT", "8000"))
    uvicorn.run(
        "main:app",
        host=os.getenv("HYSIO_HOST", "127.0.0.1"),
        port=port,
        reload=False,
    )


if __name__ == "__main__":
    main()
