# Role: FastAPI app bootstrap for the agent proxy. Loads environment config early, registers the proxy router,
# and exposes health/docs endpoints.

from fastapi import FastAPI

import agent_chat.config
agent_chat.config.load_env()

from agent_chat.api.proxy import router as proxy_router

app = FastAPI(title="Agent Chat Proxy", version="0.1.0")
app.include_router(proxy_router)


@app.get("/")
def root() -> dict:
    # Role: quick discoverability for clients (where are docs/health/proxy).
    return {
        "message": "Agent chat proxy is running",
        "docs": "/docs",
        "health": "/health",
        "proxy": "/api/proxy",
    }


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}
