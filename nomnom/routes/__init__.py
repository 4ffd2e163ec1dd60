"""
FastAPI routers for all API endpoints.

Each module defines a router for one area (profile, restaurants, friends,
users, picker) and is registered in nomnom/main.py.
"""
