"""Chat rooms over WebSocket, documented with AsyncAPI.

    flask --app examples.chat_app:create_app run
    curl localhost:5000/asyncapi.json
"""
from enum import Enum
from typing import Any, Dict, Literal, Optional

from flask import Flask
from pydantic import BaseModel, Field
from werkzeug.exceptions import HTTPException

from flask_asyncapi import AsyncAPI, ChannelConfig, MessageConfig, create_websocket_server


class ChatMessage(BaseModel):
    """A message posted to a room."""
    message: str
    user_id: str = Field(description="Author of the message")


class ChatEvent(BaseModel):
    type: Literal["message"]
    message_id: str
    user_id: str
    message: str
    timestamp: float


class Presence(str, Enum):
    ONLINE = "online"
    AWAY = "away"
    OFFLINE = "offline"


class PresenceUpdate(BaseModel):
    status: Presence
    note: Optional[str] = None


class ChatHeaders(BaseModel):
    authorization: str


chat_channel = ChannelConfig(
    path="/chat/:roomId",
    description="Real-time chat channel",
    send=MessageConfig(payload=ChatMessage, headers=ChatHeaders, summary="Chat message", description="Send a chat message"),
    receive=MessageConfig(payload=ChatEvent, summary="Chat events", description="Receive chat messages"),
    tags=["chat", "real-time"],
    servers=["development"],
)

presence_channel = ChannelConfig(
    path="/presence/:userId",
    description="Track user presence",
    send=MessageConfig(payload=PresenceUpdate, description="Update your presence status"),
    tags=["presence"],
)


def on_chat(ws, message, context):
    ws.send({"type": "message", "message": message["message"]})


def create_app(config: Optional[Dict[str, Any]] = None) -> Flask:
    app = Flask(__name__)
    app.config["ASYNCAPI_TITLE"] = "Chat API"
    if config:
        app.config.update(config)

    asyncapi = AsyncAPI(servers={"development": create_websocket_server("localhost:5000", "Development server")})
    asyncapi.channel("chat", chat_channel, on_chat)
    asyncapi.channel("presence", presence_channel)
    asyncapi.doc("/asyncapi.json")
    asyncapi.doc_yaml("/asyncapi.yaml")
    asyncapi.init_app(app)

    @app.route("/healthz")
    def health():
        return {"status": "ok"}

    # Unified error handler producing standardized JSON shape
    @app.errorhandler(Exception)
    def handle_errors(e):
        if isinstance(e, HTTPException):
            return {"error": {"status": e.code, "title": e.name, "detail": e.description}}, e.code
        app.logger.exception("Unhandled exception")
        return {"error": {"status": 500, "title": "Internal Server Error", "detail": "Unexpected error"}}, 500

    return app
