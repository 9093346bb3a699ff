"""
Authentication.

Responsibilities:
- Hash and verify passwords with bcrypt.
- Issue and verify the bearer tokens handed out at login.
- Gate endpoints on a valid token.
"""
