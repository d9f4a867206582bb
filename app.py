import os
import logging
from flask import Flask, request, jsonify
from dotenv import load_dotenv
from chatbot import ChatbotConfig, ChatbotService, DataUnavailable, JsonFileDataProvider

# Configure logging for the server
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Load environment variables from .env file
load_dotenv()


def create_app(chatbot_service=None, data_provider=None):
    """
    Build the Flask app around a chatbot service

    Args:
        chatbot_service: Service to serve from; built from the environment if omitted
        data_provider: Provider used to save admin data; defaults to the service's provider
    """
    app = Flask(__name__)

    if chatbot_service is None:
        config = ChatbotConfig.from_env()
        provider = data_provider or JsonFileDataProvider(config.chatbot_data_path, config.vulnerability_data_path)
        chatbot_service = ChatbotService(provider, config)
        logger.info("✅ Chatbot service initialized")
    provider = data_provider or chatbot_service.provider

    def get_message():
        if request.is_json:
            data = request.get_json(silent=True) or {}
            message = data.get("message", "")
        else:
            message = request.form.get("message", "")
        return message.strip() if isinstance(message, str) else ""

    @app.route("/chat", methods=["POST"])
    def chat():
        """Classify a visitor's message and return the chatbot reply"""
        user_message = get_message()
        if not user_message:
            return jsonify({
                "error": "Please provide a message",
                "success": False
            }), 400

        result = chatbot_service.process_message(user_message)
        return jsonify(result.to_dict())

    # Legacy endpoint for backward compatibility
    @app.route("/send_message", methods=["POST"])
    def send_message():
        return chat()

    @app.route("/refresh", methods=["POST"])
    def refresh():
        """Reload chatbot and vulnerability data after an admin update"""
        try:
            chatbot_service.refresh_data()
        except DataUnavailable as e:
            return jsonify({"error": str(e), "success": False}), 503

        snapshot = chatbot_service.snapshot
        return jsonify({
            "success": True,
            "rules": len(snapshot.dataset.rules),
            "vulnerabilities": len(snapshot.vulnerabilities.rules)
        })

    def save_and_refresh(save, label):
        """Store admin-submitted data, then serve it"""
        data = request.get_json(silent=True)
        try:
            save(data)
        except ValueError as e:
            return jsonify({"error": str(e), "success": False}), 400
        except DataUnavailable as e:
            logger.error(f"Error updating {label}: {e}")
            return jsonify({"error": f"Failed to update {label}", "success": False}), 500

        try:
            chatbot_service.refresh_data()
        except DataUnavailable as e:
            return jsonify({"error": str(e), "success": False}), 503

        return jsonify({"success": True, "message": f"{label.capitalize()} updated successfully"})

    @app.route("/chatbot-data", methods=["GET"])
    def get_chatbot_data():
        """Stored chatbot responses, for the admin form"""
        try:
            dataset = provider.load_chatbot_dataset()
        except DataUnavailable as e:
            logger.error(f"Error reading chatbot data: {e}")
            return jsonify({"error": "Failed to read chatbot data", "success": False}), 500
        return jsonify(dataset.to_dict())

    @app.route("/chatbot-data", methods=["POST"])
    def update_chatbot_data():
        """Save new chatbot responses and start serving them"""
        return save_and_refresh(provider.save_chatbot_dataset, "chatbot data")

    @app.route("/vulnerability-data", methods=["GET"])
    def get_vulnerability_data():
        try:
            vulnerabilities = provider.load_vulnerability_set()
        except DataUnavailable as e:
            logger.error(f"Error reading vulnerability data: {e}")
            return jsonify({"error": "Failed to read vulnerability data", "success": False}), 500
        return jsonify(vulnerabilities.to_dict())

    @app.route("/vulnerability-data", methods=["POST"])
    def update_vulnerability_data():
        """Save new break-the-bot keywords and start matching them"""
        return save_and_refresh(provider.save_vulnerability_set, "vulnerability data")

    @app.route("/health", methods=["GET"])
    def health_check():
        """Health check endpoint"""
        snapshot = chatbot_service.snapshot
        return jsonify({
            "status": "healthy",
            "responses": len(snapshot.dataset.rules),
            "vulnerabilities": len(snapshot.vulnerabilities.rules),
            "keywords": len(snapshot.corpus)
        })

    return app


if __name__ == "__main__":
    app = create_app()
    port = int(os.getenv("PORT", "5000"))
    app.run(debug=True, host='127.0.0.1', port=port)
