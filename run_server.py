#!/usr/bin/env python3
"""Run the Promptbox web server."""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from promptbox.config import get_app_config
from promptbox.logging_config import configure_logging


def main():
    import uvicorn

    config = get_app_config()
    configure_logging(config.log_level)

    print(f"""
    Promptbox Server
      URL:        {config.base_url}
      API Docs:   {config.base_url}/docs
      Database:   {config.db_path}
      Hot Reload: {config.reload}
    """)

    uvicorn.run(
        "promptbox.server.app:app",
        host=config.host,
        port=config.port,
        reload=config.reload,
    )


if __name__ == "__main__":
    main()
