"""
Uvicorn entry point for the knowledge hub API.
"""

import argparse

import uvicorn
from dotenv import load_dotenv

from knowledge_hub.channels import get_enabled_channels
from knowledge_hub.config import config


def main():
    """Run the FastAPI server."""
    load_dotenv()

    parser = argparse.ArgumentParser(description=f"{config.APP_NAME} API server")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind the server to")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind the server to")
    parser.add_argument("--reload", action="store_true", default=config.DEBUG,
                        help="Enable auto-reload (on by default in development)")
    args = parser.parse_args()

    config.initialize()

    print(f"Starting {config.APP_NAME} v{config.APP_VERSION} on {args.host}:{args.port}")
    print(f"Transcript storage: {config.TRANSCRIPTS_DIR}")
    print(f"Enabled channels: {', '.join(c.name for c in get_enabled_channels()) or 'none'}")

    uvicorn.run(
        "knowledge_hub.api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=config.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
