"""
auth — Patient registration and login.

Provides:
  • Password hashing (bcrypt)
  • JWT issuing & verification (``TokenIssuer``)
  • User repository with separate public / credential-bearing records
  • Register / Login / Me API routes
  • ``get_current_user_id`` FastAPI dependency
"""
