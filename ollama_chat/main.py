"""Process entry point: relay API and chat page on one uvicorn server.

Environment variables are loaded from .env file.
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def main() -> None:
    """Serve the relay endpoints and mount the NiceGUI chat page on them.

    The page reaches the relay at ``relay_base_url()``, which follows
    ``HOST``/``PORT`` unless ``API_BASE_URL`` points elsewhere.
    """
    import uvicorn
    from nicegui import ui

    from ollama_chat.api.app import create_app
    from ollama_chat.client.session import relay_base_url
    from ollama_chat.relay.config import get_relay_config
    from ollama_chat.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    config = get_relay_config()
    if config.is_configured:
        logger.info(f"Relaying to Ollama at {config.ollama_api_url}")
    else:
        logger.warning("OLLAMA_API_URL is not set; relay calls will fail until it is")

    app = create_app()
    ui.run_with(
        app,
        title="Ollama Chat",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "ollama-chat-secret"),
    )

    logger.info(f"Chat UI talks to the relay at {relay_base_url()}")
    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


if __name__ == "__main__":
    main()
