#!/usr/bin/env python3
"""
sitebridge - Quick Start Script

Run this script to start the sitebridge server.
"""
import sys
import os

# Add the project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

if __name__ == "__main__":
    import uvicorn
    from sitebridge.config import get_settings
    from sitebridge.main import startup_banner
    from sitebridge.services.site_loader import SiteRegistry

    settings = get_settings()
    for line in startup_banner(settings, SiteRegistry.from_settings(settings)):
        print(line)

    uvicorn.run(
        "sitebridge.main:build_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
