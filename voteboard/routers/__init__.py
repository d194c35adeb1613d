"""
FastAPI routers grouped by domain (suggestions, auth, health).

Each file exposes an APIRouter included by voteboard.app.create_app. The
store and role policy are read from ``app.state``; routers never build them.
"""
