"""
User accounts.

Responsibilities:
- Register users with unique usernames and emails.
- Check credentials at login.
- Read and update profile data (bio, join date).
"""
