"""HTTP route tests through FastAPI's TestClient.

The lifespan is not run, so no database connection or key pool is created;
state and auth are swapped through dependency overrides.
"""

import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient

from relaychat.core.auth import require_user
from relaychat.core.state import get_state
from relaychat.data.repositories.account import UsernameTaken
from relaychat.main import app
from tests.helpers import FakeDispatcher, StubState

CHAT_REPO = "relaychat.data.repositories.chat"
USER = {"id": "u1", "username": "alice", "token": "tok"}


class RouteTestCase(unittest.TestCase):

	def setUp(self):
		self.dispatcher = FakeDispatcher("Hello from upstream")
		self.state = StubState(self.dispatcher)
		app.dependency_overrides[get_state] = lambda: self.state
		self.client = TestClient(app)

	def tearDown(self):
		app.dependency_overrides.clear()

	def login_as(self, user=USER):
		app.dependency_overrides[require_user] = lambda: user


class TestSystemRoutes(RouteTestCase):

	def test_models(self):
		r = self.client.get("/api/models")
		self.assertEqual(r.status_code, 200)
		self.assertEqual(r.json(), {"models": self.state.settings.MODELS})

	def test_health(self):
		body = self.client.get("/api/health").json()
		self.assertEqual(body["status"], "OK")
		self.assertEqual(body["keys_available"], 3)
		self.assertIn("timestamp", body)

	def test_info_lists_endpoints(self):
		body = self.client.get("/api/info").json()
		self.assertIn("/api/guest/chat", body["endpoints"])
		self.assertIn("/api/chats/{chat_id}/messages", body["endpoints"])

	def test_unknown_api_path(self):
		self.assertEqual(self.client.get("/api/nothing-here").status_code, 404)

	def test_request_timing_header(self):
		self.assertIn("x-process-time", self.client.get("/api/health").headers)


class TestGuestRoutes(RouteTestCase):

	def test_guest_chat(self):
		r = self.client.post("/api/guest/chat", json={
			"message": "What is 2+2?",
			"model": "sonar(clinesp)",
			"history": [{"role": "user", "content": "hi"}, {"role": "assistant", "content": "hello"}]
		})
		self.assertEqual(r.status_code, 200)
		self.assertEqual(r.json(), {"response": "Hello from upstream"})
		messages, model = self.dispatcher.calls[0]
		self.assertEqual([m.content for m in messages], ["hi", "hello", "What is 2+2?"])
		self.assertEqual(model, "sonar(clinesp)")

	def test_guest_chat_requires_message(self):
		for body in ({}, {"message": ""}, {"message": "   "}):
			r = self.client.post("/api/guest/chat", json=body)
			self.assertEqual(r.status_code, 400)
			self.assertEqual(r.json()["detail"], "Message is required")
		self.assertEqual(self.dispatcher.calls, [])

	def test_upstream_unavailable_is_opaque(self):
		self.dispatcher.fail = True
		r = self.client.post("/api/guest/chat", json={"message": "hi"})
		self.assertEqual(r.status_code, 502)
		self.assertEqual(r.json()["detail"], "Unable to get response from AI service. Please try again later.")

	def test_no_keys_configured(self):
		self.state.dispatcher = None
		r = self.client.post("/api/guest/chat", json={"message": "hi"})
		self.assertEqual(r.status_code, 503)


class TestAuthRoutes(RouteTestCase):

	def test_signup(self):
		with patch("relaychat.core.auth.create_user", return_value={"id": "u1", "username": "alice"}) as create, \
			patch("relaychat.core.auth.issue_token", return_value="tok"):
			r = self.client.post("/api/signup", json={"username": " alice ", "password": "secret1"})
		self.assertEqual(r.status_code, 200)
		self.assertEqual(r.json(), {"user": {"id": "u1", "username": "alice"}, "token": "tok"})
		create.assert_called_once_with("alice", "secret1")

	def test_signup_validation(self):
		r = self.client.post("/api/signup", json={"username": "alice"})
		self.assertEqual(r.status_code, 400)
		self.assertEqual(r.json()["detail"], "Username and password are required")

		r = self.client.post("/api/signup", json={"username": "alice", "password": "12345"})
		self.assertEqual(r.status_code, 400)
		self.assertEqual(r.json()["detail"], "Password must be at least 6 characters")

	def test_signup_duplicate(self):
		with patch("relaychat.core.auth.create_user", side_effect=UsernameTaken()):
			r = self.client.post("/api/signup", json={"username": "Alice", "password": "secret1"})
		self.assertEqual(r.status_code, 409)
		self.assertEqual(r.json()["detail"], "Username already exists")

	def test_login(self):
		with patch("relaychat.core.auth.authenticate_user", return_value={"id": "u1", "username": "alice"}), \
			patch("relaychat.core.auth.issue_token", return_value="tok"):
			r = self.client.post("/api/login", json={"username": "alice", "password": "secret1"})
		self.assertEqual(r.status_code, 200)
		self.assertEqual(r.json()["token"], "tok")

	def test_login_rejected(self):
		from relaychat.core.auth import InvalidCredentials
		with patch("relaychat.core.auth.authenticate_user", side_effect=InvalidCredentials()):
			r = self.client.post("/api/login", json={"username": "alice", "password": "nope-nope"})
		self.assertEqual(r.status_code, 401)
		self.assertEqual(r.json()["detail"], "Invalid credentials")

	def test_logout_revokes_token(self):
		self.login_as()
		with patch("relaychat.data.repositories.auth_token.revoke_token", return_value=True) as revoke:
			r = self.client.post("/api/logout")
		self.assertEqual(r.json(), {"success": True})
		revoke.assert_called_once_with("tok")

	def test_chats_require_token(self):
		r = self.client.get("/api/chats")
		self.assertEqual(r.status_code, 401)
		self.assertEqual(r.json()["detail"], "No token provided")


class TestChatRoutes(RouteTestCase):

	def setUp(self):
		super().setUp()
		self.login_as()

	def test_create_chat_default_title(self):
		with patch(f"{CHAT_REPO}.create_chat", return_value={"id": "c1", "title": "New Chat"}) as create:
			r = self.client.post("/api/chats", json={})
		self.assertEqual(r.status_code, 200)
		create.assert_called_once_with("u1", "New Chat")

	def test_create_chat_with_title(self):
		with patch(f"{CHAT_REPO}.create_chat", return_value={"id": "c1", "title": "Trip"}) as create:
			self.client.post("/api/chats", json={"title": "Trip"})
		create.assert_called_once_with("u1", "Trip")

	def test_list_chats(self):
		chats = [{"id": "c1", "title": "Trip", "message_count": 2, "last_message_at": None}]
		with patch(f"{CHAT_REPO}.get_user_chats", return_value=chats) as list_chats:
			r = self.client.get("/api/chats")
		self.assertEqual(r.json(), chats)
		list_chats.assert_called_once_with("u1")

	def test_messages_of_foreign_chat(self):
		with patch(f"{CHAT_REPO}.get_chat", return_value=None):
			r = self.client.get("/api/chats/c9/messages")
		self.assertEqual(r.status_code, 404)
		self.assertEqual(r.json()["detail"], "Chat not found or access denied")

	def test_list_messages(self):
		messages = [{"id": "m1", "role": "user", "content": "hi"}]
		with patch(f"{CHAT_REPO}.get_chat", return_value={"id": "c1"}), \
			patch("relaychat.data.repositories.message.list_chat_messages", return_value=messages):
			r = self.client.get("/api/chats/c1/messages")
		self.assertEqual(r.json(), messages)

	def test_send_message(self):
		reply = {"id": "m2", "role": "assistant", "content": "Hello from upstream", "model": "sonar(clinesp)"}
		with patch("relaychat.core.chat.process_user_message", return_value=reply) as process:
			r = self.client.post("/api/chats/c1/messages", json={"message": "hi", "model": "sonar(clinesp)"})
		self.assertEqual(r.status_code, 200)
		self.assertEqual(r.json(), reply)
		self.assertEqual(process.call_args.args[:4], ("c1", "u1", "hi", "sonar(clinesp)"))

	def test_send_message_requires_text(self):
		r = self.client.post("/api/chats/c1/messages", json={"model": "x"})
		self.assertEqual(r.status_code, 400)

	def test_send_message_upstream_down(self):
		self.dispatcher.fail = True
		with patch(f"{CHAT_REPO}.get_chat", return_value={"id": "c1"}), \
			patch(f"{CHAT_REPO}.touch_chat"), \
			patch("relaychat.data.repositories.message.add_message", return_value={}), \
			patch("relaychat.data.repositories.message.recent_messages", return_value=[{"role": "user", "content": "hi"}]):
			r = self.client.post("/api/chats/c1/messages", json={"message": "hi"})
		self.assertEqual(r.status_code, 502)

	def test_rename_chat(self):
		with patch(f"{CHAT_REPO}.update_chat_title", return_value={"id": "c1", "title": "Renamed"}) as update:
			r = self.client.patch("/api/chats/c1", json={"title": " Renamed "})
		self.assertEqual(r.json()["title"], "Renamed")
		update.assert_called_once_with("c1", "u1", "Renamed")

	def test_rename_requires_title(self):
		self.assertEqual(self.client.patch("/api/chats/c1", json={"title": ""}).status_code, 400)

	def test_rename_foreign_chat(self):
		with patch(f"{CHAT_REPO}.update_chat_title", return_value=None):
			self.assertEqual(self.client.patch("/api/chats/c1", json={"title": "x"}).status_code, 404)

	def test_unexpected_error_is_an_opaque_500(self):
		client = TestClient(app, raise_server_exceptions=False)
		with patch(f"{CHAT_REPO}.update_chat_title", side_effect=RuntimeError("mongo down secret")):
			r = client.patch("/api/chats/c1", json={"title": "x"})
		self.assertEqual(r.status_code, 500)
		self.assertEqual(r.json(), {"detail": "Internal server error"})
		self.assertNotIn("secret", r.text)

	def test_delete_chat(self):
		with patch(f"{CHAT_REPO}.delete_chat", return_value={"id": "c1"}) as delete:
			r = self.client.delete("/api/chats/c1")
		self.assertEqual(r.json(), {"success": True})
		delete.assert_called_once_with("c1", "u1")

	def test_delete_foreign_chat(self):
		with patch(f"{CHAT_REPO}.delete_chat", return_value=None):
			self.assertEqual(self.client.delete("/api/chats/c1").status_code, 404)

if __name__ == "__main__":
	unittest.main(verbosity=2)
