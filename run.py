#!/usr/bin/env python3
"""
Startup script for the TSSR site survey backend
"""
from dotenv import load_dotenv
from tssr_backend.app import create_app
from tssr_backend.config import Settings

if __name__ == '__main__':
    load_dotenv()
    settings = Settings()
    app = create_app()
    app.run(debug=True, host=settings.host, port=settings.port)
