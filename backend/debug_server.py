#!/usr/bin/env python3
"""
Debug server script for line-by-line debugging.
Runs the API with auto-reload and verbose logging so breakpoints in the
discount services are hit on each request.
"""
import sys
import os
from pathlib import Path

# Add the backend directory to the Python path
backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))

# Set up environment
os.chdir(backend_dir)

if __name__ == "__main__":
    import uvicorn

    # Import string format is required for reload to work
    uvicorn.run(
        "discount_provisioner.main:app",
        host="127.0.0.1",
        port=8765,
        reload=True,
        log_level="debug"
    )
