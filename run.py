import argparse
import logging

import uvicorn
from threadboard.core.config import settings

logger = logging.getLogger("threadboard")

def main():
    parser = argparse.ArgumentParser(description="Run the Threadboard API server")
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="Host to run the server on (default: 0.0.0.0)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to run the server on (default: 8000)"
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload on code changes (default: based on DEBUG setting)"
    )

    args = parser.parse_args()

    use_reload = args.reload or settings.DEBUG

    if settings.DEBUG:
        print(f"Starting {settings.PROJECT_NAME} in {settings.ENVIRONMENT} mode")
        print(f"Auto-reload: {'enabled' if use_reload else 'disabled'}")
        print(f"Server running at http://{args.host}:{args.port}")
        print(f"  - Swagger UI: http://{args.host}:{args.port}/docs")

    try:
        uvicorn.run(
            "threadboard.main:app",
            host=args.host,
            port=args.port,
            reload=use_reload
        )
    except Exception as e:
        logger.error(f"Error starting server: {e}")
        raise

if __name__ == "__main__":
    main()
