"""
Star ratings and text reviews.

Responsibilities:
- Record and delete reviews on behalf of their authors.
- Keep each recipe's average rating consistent with its reviews.
- List reviews per recipe and per user.
"""
