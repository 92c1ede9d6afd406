"""
FastAPI routers grouped by domain (auth, posts, likes, data).

Each module exposes an APIRouter included by app.create_app. Services are
looked up on request.app.state so that every app instance owns its stores.
"""
