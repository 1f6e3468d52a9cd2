"""REST endpoints and WebSocket channels in one app, each with its own document.

    flask --app examples.unified_api:create_app run
    curl localhost:5000/api/openapi.json
    curl localhost:5000/api/asyncapi.json
"""
from typing import Any, Dict, List, Literal, Optional, Union

from flask import Blueprint, Flask, request
from pydantic import BaseModel, Field

from flask_asyncapi import (
    AsyncAPI,
    ChannelConfig,
    MessageConfig,
    create_secure_websocket_server,
    create_websocket_server,
    merge_api_docs,
)

users_bp = Blueprint("users", __name__)


@users_bp.get("/users")
def list_users():
    """List users"""
    return {"users": [{"id": "1", "username": "alice", "status": "online"}]}


@users_bp.post("/users")
def create_user():
    """Create a user"""
    body = request.get_json(silent=True) or {}
    return {"id": "123", "username": body.get("username"), "email": body.get("email")}, 201


@users_bp.get("/rooms/<room_id>/messages")
def list_messages(room_id):
    """List messages of a room"""
    return {"messages": [{"id": "1", "userId": "1", "content": f"Message in room {room_id}"}]}


class RoomMessage(BaseModel):
    type: Literal["message"]
    user_id: str
    username: str
    content: str = Field(description="Message text, 1 to 500 characters")
    timestamp: float


class UserJoined(BaseModel):
    type: Literal["user_joined"]
    user_id: str
    username: str


class UserLeft(BaseModel):
    type: Literal["user_left"]
    user_id: str
    username: str


class RoomEvent(BaseModel):
    event: Union[RoomMessage, UserJoined, UserLeft] = Field(discriminator="type")


class DataPoint(BaseModel):
    data_type: str
    timestamp: float
    value: float
    metadata: Optional[Dict[str, Any]] = None


class Notification(BaseModel):
    type: Literal["info", "success", "warning", "error"]
    title: str
    message: str
    recipients: List[str] = Field(default_factory=list)


rooms_channel = ChannelConfig(
    path="/ws/rooms/:roomId",
    description="Real-time chat in a specific room",
    send=MessageConfig(payload=RoomMessage, summary="Chat message", description="Send a chat message"),
    receive=MessageConfig(payload=RoomEvent, summary="Chat events", description="Receive chat events"),
    tags=["chat", "real-time"],
)

notifications_channel = ChannelConfig(
    path="/ws/notifications/:userId",
    description="Receive real-time notifications",
    send=MessageConfig(payload=Notification, description="Send a notification"),
    tags=["notifications"],
)

stream_channel = ChannelConfig(
    path="/ws/stream/:dataType",
    description="Stream real-time data updates",
    receive=MessageConfig(payload=DataPoint, description="Receive data stream updates"),
    tags=["streaming", "data"],
)


def _log_message(ws, message, context):
    pass


def create_app(config: Optional[Dict[str, Any]] = None) -> Flask:
    app = Flask(__name__)
    if config:
        app.config.update(config)
    app.register_blueprint(users_bp, url_prefix="/api")

    ws_api = AsyncAPI(
        info={
            "title": "Real-time Communication API",
            "version": "1.0.0",
            "description": "WebSocket channels for real-time features",
        },
        servers={
            "production": create_secure_websocket_server("api.example.com", "Production WebSocket server"),
            "development": create_websocket_server("localhost:5000", "Development server"),
        },
    )
    ws_api.channel("chatRoom", rooms_channel, _log_message)
    ws_api.channel("notifications", notifications_channel, _log_message)
    ws_api.channel("dataStream", stream_channel, _log_message)

    merged = merge_api_docs(app, ws_api)
    merged.openapi_doc("/api/openapi.json")
    merged.asyncapi_doc("/api/asyncapi.json")
    app.extensions["unified_api"] = merged
    return app
