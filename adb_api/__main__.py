"""
Run the ADB device API with uvicorn.

    python -m adb_api --host 0.0.0.0 --port 8765
"""

import argparse

import uvicorn


def main():
    parser = argparse.ArgumentParser(description="ADB Device Control API")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8765, help="Port to bind to")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level")
    args = parser.parse_args()

    from .logging_utils import setup_logger
    from .main import app

    setup_logger("adb_api", args.log_level)
    uvicorn.run(
        app,
        host=args.host,
        port=args.port,
        log_level=args.log_level.lower()
    )


if __name__ == "__main__":
    main()
