"""
Authentication service (registration, login, approval).
Runs standalone with only its own blueprint mounted.
"""

import os

from backend.gateway.server import create_app

app = create_app(services=["auth"])

if __name__ == "__main__":
    app.run(port=int(os.getenv("AUTH_PORT", 5001)))
