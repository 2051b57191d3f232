"""
FastAPI-side routing: the adapter that mounts the JSON:API routes plus the
plain routers (health check) included directly in the app.
"""
