"""
Dev server for the NatureID web app.

Usage:
    python natureid/scripts/run_server.py
    VISION_ADAPTER=mock CAMERA_ADAPTER=mock python natureid/scripts/run_server.py
"""
import os
import sys
from pathlib import Path

import uvicorn

ROOT = Path(__file__).parents[2]
sys.path.insert(0, str(ROOT))


if __name__ == "__main__":
    host = os.getenv("NATUREID_HOST", "127.0.0.1")
    port = int(os.getenv("NATUREID_PORT", "8000"))
    print(f"NatureID starting on http://{host}:{port}")
    uvicorn.run("natureid.web.app:app", host=host, port=port)
