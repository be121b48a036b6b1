import logging
import os

from dotenv import load_dotenv
from flask import Flask
from flask_cors import CORS

from services.gemini_service import (
    DEFAULT_MAX_OUTPUT_TOKENS,
    DEFAULT_MODEL,
    DEFAULT_TEMPERATURE,
    DEFAULT_TIMEOUT,
    GEMINI_API_BASE,
)
from routes.prioritize import prioritize_bp

load_dotenv()

CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]


# Initialize Flask app
app = Flask(__name__)
# The Gemini credential is only ever read from the environment (or .env)
app.config["GEMINI_API_KEY"] = os.environ.get("GEMINI_API_KEY")
app.config["GEMINI_MODEL"] = os.environ.get("GEMINI_MODEL") or DEFAULT_MODEL
app.config["GEMINI_API_BASE"] = os.environ.get("GEMINI_API_BASE") or GEMINI_API_BASE
app.config["GEMINI_TEMPERATURE"] = float(
    os.environ.get("GEMINI_TEMPERATURE") or DEFAULT_TEMPERATURE
)
app.config["GEMINI_MAX_OUTPUT_TOKENS"] = int(
    os.environ.get("GEMINI_MAX_OUTPUT_TOKENS") or DEFAULT_MAX_OUTPUT_TOKENS
)
app.config["GEMINI_TIMEOUT"] = float(os.environ.get("GEMINI_TIMEOUT") or DEFAULT_TIMEOUT)
app.config["CORS_ORIGINS"] = [
    origin.strip() for origin in (os.environ.get("CORS_ORIGINS") or "*").split(",")
]

logging.basicConfig(level=(os.environ.get("LOG_LEVEL") or "INFO").upper())

# Preflight requests are answered with an empty 200 and permissive headers
CORS(
    app,
    resources={
        r"/functions/*": {
            "origins": app.config["CORS_ORIGINS"],
            "allow_headers": CORS_ALLOW_HEADERS,
            "send_wildcard": True,
        }
    },
)
app.register_blueprint(prioritize_bp)


# Application Execution
# ------------------------------
if __name__ == "__main__":
    app.run(debug=True)
