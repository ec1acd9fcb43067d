#!/usr/bin/env python3
"""
Startup script for the Studio Inventory backend
"""
import os
import sys
from pathlib import Path

backend_dir = Path(__file__).parent.absolute()

# Change to backend directory so relative imports and .env resolve
os.chdir(backend_dir)
sys.path.insert(0, str(backend_dir))


def main():
    if not (backend_dir / "app.py").exists():
        print(f"ERROR: app.py not found at {backend_dir / 'app.py'}")
        sys.exit(1)

    print("Starting backend server...")

    try:
        import app  # noqa: F401  fail fast on import errors
        import uvicorn

        print("✅ App module imported successfully")
        host = os.getenv("HOST", "0.0.0.0")
        port = int(os.getenv("PORT", "8000"))
        print(f"🚀 Starting server on http://{host}:{port}")

        uvicorn.run(
            "app:app",
            host=host,
            port=port,
            reload=False,
            log_level="info"
        )
    except ImportError as e:
        print(f"❌ Import error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
