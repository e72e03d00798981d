"""Run the ReadFast API server."""

import argparse

import uvicorn


def main():
    """Run the API server."""
    parser = argparse.ArgumentParser(description="Run the ReadFast API")
    parser.add_argument("--host", type=str, default="127.0.0.1", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args()

    print(f"Starting ReadFast API on http://{args.host}:{args.port}")
    print(f"  - Health: http://{args.host}:{args.port}/api/health")

    uvicorn.run(
        "readfast.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="debug" if args.debug else "info",
    )


if __name__ == "__main__":
    main()
