from flask_socketio import emit

from board.extensions.extensions import socketio

_registered = False


def notify_feed_changed(action: str, post_id: int):
    socketio.emit("feed_updated", {"action": action, "postId": post_id})


def register_feed_events():
    global _registered
    if _registered:
        return

    from board.errors import RepositoryError
    from board.services import post_service

    @socketio.on("connect")
    def handle_connect(auth=None):
        emit("connected", {"feed": "posts"})

    @socketio.on("refresh_feed")
    def handle_refresh_feed(data=None):
        limit = None
        requested = data.get("limit") if isinstance(data, dict) else None
        if isinstance(requested, int) and not isinstance(requested, bool):
            limit = requested

        try:
            posts = post_service.list_feed(limit)
        except RepositoryError as exc:
            emit("feed_error", {"error": str(exc)})
            return

        emit("feed", {"posts": post_service.serialize_feed(posts)})

    _registered = True
