import os

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# MCP Server Configuration
SERVER_NAME = "nanobanana-mcp"
SERVER_VERSION = "1.0.0"

# Gemini Direct API Configuration
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash-image-preview")
GEMINI_API_URL = (
    f"https://generativelanguage.googleapis.com/v1beta/models/{GEMINI_MODEL}:generateContent"
)

# OpenRouter API Configuration
OPENROUTER_API_KEY = os.getenv("OPENROUTER_API_KEY")
OPENROUTER_API_URL = "https://openrouter.ai/api/v1/chat/completions"
OPENROUTER_IMAGE_MODEL = os.getenv(
    "OPENROUTER_IMAGE_MODEL", "google/gemini-2.5-flash-image-preview"
)
OPENROUTER_SITE_URL = os.getenv(
    "OPENROUTER_SITE_URL", "https://github.com/nanobanana-mcp"
)
OPENROUTER_APP_NAME = os.getenv("OPENROUTER_APP_NAME", "Nano Banana MCP Server")

# API Timeout Configuration
GEMINI_TIMEOUT = int(os.getenv("GEMINI_TIMEOUT", "120"))  # seconds
OPENROUTER_TIMEOUT = int(os.getenv("OPENROUTER_TIMEOUT", "120"))  # seconds
IMAGE_FETCH_TIMEOUT = int(os.getenv("IMAGE_FETCH_TIMEOUT", "30"))  # seconds

# Output Configuration
# Relative to the working directory of the MCP client that launched us
OUTPUT_DIR = "generated_images"
DEFAULT_FILENAME = "nanobanana"

# Logging Configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_TO_FILE = os.getenv("LOG_TO_FILE", "false").lower() == "true"
LOG_FILE_PATH = os.getenv("LOG_FILE_PATH", "logs/nanobanana_mcp.log")
