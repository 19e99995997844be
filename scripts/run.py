#!/usr/bin/env python3
"""
ReelTrack Startup Script
"""

import asyncio
import secrets
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))


def generate_env_file():
    """Generate .env file if it doesn't exist"""
    env_path = Path(__file__).parent.parent / ".env"
    env_example = Path(__file__).parent.parent / ".env.example"

    if env_path.exists():
        return

    if not env_example.exists():
        print("Warning: .env.example not found, using default configuration")
        return

    content = env_example.read_text()
    content = content.replace(
        "SECRET_KEY=change-this-to-a-random-secret-key-minimum-32-characters",
        f"SECRET_KEY={secrets.token_urlsafe(48)}",
    )
    env_path.write_text(content)
    print("Generated .env file with random secret key")


async def main():
    """Initialize the database and serve the API"""
    generate_env_file()

    import uvicorn
    from reeltrack.config import settings
    from reeltrack.database import init_db

    print("Initializing database...")
    await init_db()
    print("Database initialized successfully.")

    print(f"""
    ReelTrack API:     http://{settings.HOST}:{settings.PORT}/api
     - Documentation:  http://{settings.HOST}:{settings.PORT}/docs
     - Health check:   http://{settings.HOST}:{settings.PORT}/api/health

    Press CTRL+C to stop the server
    """)

    config = uvicorn.Config(
        "reeltrack.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=False,
        log_level="info",
        access_log=True,
    )
    server = uvicorn.Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
