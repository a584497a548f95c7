"""
Organizer management service.
Runs standalone with only its own blueprint mounted.
"""

import os

from backend.gateway.server import create_app

app = create_app(services=["organizers"])

if __name__ == "__main__":
    app.run(port=int(os.getenv("ORGANIZERS_PORT", 5002)))
