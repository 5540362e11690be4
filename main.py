# main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import config
# REST routes
from api.routes import router as api_router
# WebSocket endpoint
from realtime.endpoints import ws_endpoint

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Bull vs Bear", version="1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- REST API ---
app.include_router(api_router)

# --- WebSockets ---
app.add_api_websocket_route("/ws", ws_endpoint)


# --- Healthcheck ---
@app.get("/health")
async def health():
    return {"status": "ok"}


# --- Dev runner ---
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host=config.HOST, port=config.PORT, reload=True)
