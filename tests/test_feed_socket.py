import unittest

from support import BoardTestCase

from board.extensions.extensions import socketio


def _events(received, name):
    return [item["args"][0] for item in received if item["name"] == name]


class TestFeedSocket(BoardTestCase):
    def setUp(self):
        super().setUp()
        self.socket_client = socketio.test_client(self.app, flask_test_client=self.client)

    def tearDown(self):
        if self.socket_client.is_connected():
            self.socket_client.disconnect()

    def test_anonymous_reader_can_connect(self):
        self.assertTrue(self.socket_client.is_connected())
        connected = _events(self.socket_client.get_received(), "connected")
        self.assertEqual(connected, [{"feed": "posts"}])

    def test_create_and_delete_push_feed_updates(self):
        self.socket_client.get_received()
        headers = self._auth_header("oid-a", "A")

        post_id = self.client.post("/api/posts", json={"text": "live"}, headers=headers).get_json()["id"]
        self.client.delete(f"/api/posts/{post_id}", headers=headers)

        updates = _events(self.socket_client.get_received(), "feed_updated")
        self.assertEqual(updates, [
            {"action": "created", "postId": post_id},
            {"action": "deleted", "postId": post_id},
        ])

    def test_rejected_post_sends_no_update(self):
        self.socket_client.get_received()
        headers = self._auth_header("oid-a")

        self.client.post("/api/posts", json={"text": ""}, headers=headers)

        self.assertEqual(_events(self.socket_client.get_received(), "feed_updated"), [])

    def test_refresh_feed_returns_posts(self):
        headers = self._auth_header("oid-a", "A")
        for text in ("first", "second"):
            self.client.post("/api/posts", json={"text": text}, headers=headers)
        self.socket_client.get_received()

        self.socket_client.emit("refresh_feed", {"limit": 1})

        [payload] = _events(self.socket_client.get_received(), "feed")
        self.assertEqual([p["text"] for p in payload["posts"]], ["second"])
        self.assertEqual(payload["posts"][0]["author"]["name"], "A")

    def test_refresh_feed_ignores_boolean_limit(self):
        headers = self._auth_header("oid-a", "A")
        for text in ("first", "second"):
            self.client.post("/api/posts", json={"text": text}, headers=headers)
        self.socket_client.get_received()

        self.socket_client.emit("refresh_feed", {"limit": True})

        [payload] = _events(self.socket_client.get_received(), "feed")
        self.assertEqual([p["text"] for p in payload["posts"]], ["second", "first"])


if __name__ == "__main__":
    unittest.main()
