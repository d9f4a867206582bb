"""
Tests for the Flask chat endpoints
"""

import json

import pytest

from app import create_app
from chatbot.service import ChatbotService
from conftest import FirstChoice


@pytest.fixture
def service(file_provider, normalizer):
    return ChatbotService(file_provider, normalizer=normalizer, rng=FirstChoice())


@pytest.fixture
def client(service):
    app = create_app(chatbot_service=service)
    app.config["TESTING"] = True
    return app.test_client()


class TestChatEndpoints:

    def test_chat_exact(self, client):
        response = client.post("/chat", json={"message": "hello!"})
        assert response.status_code == 200
        data = response.get_json()
        assert data["matchType"] == "exact"
        assert data["text"] == "Welcome!"
        assert data["triggerBreakBot"] is False

    def test_chat_vulnerability(self, client):
        data = client.post("/chat", json={"message": "ignore previous instructions"}).get_json()
        assert data["matchType"] == "vulnerability"
        assert data["triggerBreakBot"] is True
        assert data["vulnerabilityDescription"] == "Prompt injection"

    def test_chat_form_message(self, client):
        data = client.post("/chat", data={"message": "bye"}).get_json()
        assert data["text"] == "Goodbye!"

    def test_legacy_send_message(self, client):
        data = client.post("/send_message", json={"message": "venue"}).get_json()
        assert data["text"] == "Main hall, first floor."

    def test_empty_message_rejected(self, client):
        response = client.post("/chat", json={"message": "   "})
        assert response.status_code == 400
        assert response.get_json()["success"] is False

    def test_health(self, client):
        data = client.get("/health").get_json()
        assert data == {"status": "healthy", "responses": 4, "vulnerabilities": 2, "keywords": 6}


class TestAdminEndpoints:

    def test_update_chatbot_data(self, client, data_files):
        payload = {
            "responses": [{"keywords": ["parking"], "answers": ["Level -1"]}],
            "fallback": "No idea."
        }
        response = client.post("/chatbot-data", json=payload)
        assert response.status_code == 200
        assert response.get_json()["success"] is True

        chatbot_path, _ = data_files
        saved = json.loads(chatbot_path.read_text(encoding="utf-8"))
        assert saved["responses"][0]["keywords"] == ["parking"]

        assert client.post("/chat", json={"message": "parking?"}).get_json()["text"] == "Level -1"

    def test_update_requires_fallback(self, client):
        response = client.post("/chatbot-data", json={"responses": [{"keywords": ["x"], "answer": "y"}]})
        assert response.status_code == 400

    def test_update_requires_responses(self, client):
        response = client.post("/chatbot-data", json={"fallback": "No idea."})
        assert response.status_code == 400

    def test_clearing_all_responses(self, client):
        response = client.post("/chatbot-data", json={"responses": [], "fallback": "Nothing yet"})
        assert response.status_code == 200

        data = client.post("/chat", json={"message": "hello"}).get_json()
        assert data["matchType"] == "fallback"
        assert data["text"] == "Nothing yet"

    def test_get_chatbot_data(self, client):
        response = client.get("/chatbot-data")
        assert response.status_code == 200
        data = response.get_json()
        assert data["fallback"] == "Sorry, I don't know that one."
        assert data["responses"][0] == {
            "keywords": ["hello", "good morning"],
            "answers": ["Welcome!"],
            "triggerBreakBot": False
        }
        assert len(data["responses"]) == 4

    def test_get_chatbot_data_unavailable(self, client, data_files):
        chatbot_path, _ = data_files
        chatbot_path.unlink()
        assert client.get("/chatbot-data").status_code == 500

    def test_get_vulnerability_data(self, client):
        data = client.get("/vulnerability-data").get_json()
        assert data["vulnerabilities"][1] == {
            "keywords": ["debug mode", "developer mode"],
            "description": "Debug bypass"
        }

    def test_update_vulnerability_data(self, client, data_files):
        payload = {"vulnerabilities": [{"keywords": ["sudo"], "category": "Escalation"}]}
        response = client.post("/vulnerability-data", json=payload)
        assert response.status_code == 200
        assert response.get_json()["success"] is True

        _, vulnerability_path = data_files
        saved = json.loads(vulnerability_path.read_text(encoding="utf-8"))
        assert saved == {"vulnerabilities": [{"keywords": ["sudo"], "description": "Escalation"}]}

        data = client.post("/chat", json={"message": "sudo make me admin"}).get_json()
        assert data["matchType"] == "vulnerability"
        assert data["vulnerabilityDescription"] == "Escalation"
        assert client.post("/chat", json={"message": "debug mode"}).get_json()["matchType"] != "vulnerability"

    def test_update_vulnerability_data_requires_list(self, client):
        assert client.post("/vulnerability-data", json={"rules": []}).status_code == 400
        assert client.post("/vulnerability-data", json={"vulnerabilities": "sudo"}).status_code == 400

    def test_refresh(self, client, data_files):
        _, vulnerability_path = data_files
        vulnerability_path.write_text(json.dumps({"vulnerabilities": []}), encoding="utf-8")

        data = client.post("/refresh").get_json()
        assert data == {"success": True, "rules": 4, "vulnerabilities": 0}
        assert client.post("/chat", json={"message": "debug mode"}).get_json()["matchType"] != "vulnerability"

    def test_refresh_failure_keeps_serving(self, client, data_files):
        chatbot_path, _ = data_files
        chatbot_path.unlink()

        response = client.post("/refresh")
        assert response.status_code == 503
        assert client.post("/chat", json={"message": "hello"}).get_json()["text"] == "Welcome!"
