"""
auth: user authentication module.

Provides:
  • Signed session token creation & verification
  • Password hashing (bcrypt)
  • Signup / Login / Logout / getMe API routes
  • ``require_user`` session guard dependency
"""
