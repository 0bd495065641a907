"""
GOGLOBAL Market Analysis - Web Server Entry Point
=================================================

Run this to start the API server:
    python main.py

Then point the frontend at http://127.0.0.1:3000.

To analyze a product from the command line instead:
    python run_analysis.py product.json
"""

import logging
import sys

import uvicorn

from goglobal.infrastructure.config import get_settings

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(name)s - %(message)s'
)
logger = logging.getLogger(__name__)


def main():
    """Start the web server."""
    settings = get_settings()

    errors = settings.errors()
    if errors:
        for issue in errors:
            print(f"  {issue}", file=sys.stderr)
        print("\n  Fix the settings above (see .env) and start again.\n", file=sys.stderr)
        sys.exit(1)

    for issue in settings.validate():
        logger.warning(issue)

    server = settings.server
    print("\n" + "=" * 50)
    print("   GOGLOBAL Market Analysis Server")
    print("=" * 50)
    print(f"\n   Server running on:  http://{server.host}:{server.port}")
    print(f"   Environment:        {server.environment}")
    print(f"   Frontend URL:       {server.frontend_url}")
    print(f"   Analysis provider:  {settings.analysis.provider}")
    print(f"   LLM backend:        {settings.llm.backend} ({settings.llm.model})")
    print(f"   API key:            {settings.llm.key_preview}")
    print("\n   Available endpoints:")
    print("     GET  /              - API information")
    print("     GET  /api/health    - Health check")
    print("     POST /api/analyze   - Market analysis")
    print("\n   Press Ctrl+C to stop\n")

    uvicorn.run(
        "goglobal.web.app:app",
        host=server.host,
        port=server.port,
        reload=server.is_development,
        log_level="info"
    )


if __name__ == "__main__":
    main()
