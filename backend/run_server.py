#!/usr/bin/env python3
"""
Standalone server script for the discount provisioning API.
This script starts the FastAPI server with proper configuration.
"""
import sys
import os
import socket
import time
from pathlib import Path

# Add the backend directory to the Python path
backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))

# Set up environment
os.chdir(backend_dir)


def is_port_in_use(host, port):
    """Check if a port is already in use."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        try:
            s.bind((host, port))
            return False
        except OSError:
            return True


if __name__ == "__main__":
    import uvicorn
    from discount_provisioner.core.config import settings

    HOST = settings.HOST
    PORT = settings.PORT

    # Retry a few times in case a previous instance is still shutting down
    for attempt in range(3):
        if not is_port_in_use(HOST, PORT):
            break
        print(f"Port {PORT} is in use. Retrying in 3s ({attempt + 1}/3)...", file=sys.stderr)
        time.sleep(3)
    else:
        print(f"ERROR: Port {PORT} is still in use after retries. Another instance may be running.", file=sys.stderr)
        print(f"Please stop the existing server or kill the process: lsof -ti:{PORT} | xargs kill -9", file=sys.stderr)
        sys.exit(1)

    # Test import before starting server
    try:
        print("Testing app import...")
        from discount_provisioner.main import app  # noqa: F401
        print("App import successful!")
    except Exception as e:
        print(f"ERROR: Failed to import app: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc(file=sys.stderr)
        sys.exit(1)

    try:
        print("Starting uvicorn server...")
        print(f"Python executable: {sys.executable}")
        print(f"Working directory: {os.getcwd()}")

        uvicorn.run(
            "discount_provisioner.main:app",
            host=HOST,
            port=PORT,
            log_level="info",
            access_log=True,
            reload=False,
        )
    except KeyboardInterrupt:
        print("\nServer stopped by user")
        sys.exit(0)
    except Exception as e:
        print(f"ERROR: Failed to start server: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc(file=sys.stderr)
        sys.exit(1)
