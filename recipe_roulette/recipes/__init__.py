"""
Recipe catalogue.

Responsibilities:
- Look up cuisines by id or name.
- Create recipes owned by an authenticated user.
- Answer criteria, owner, detail and free-text recipe queries.
"""
