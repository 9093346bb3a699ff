"""
Recipe Roulette API.

Responsibilities:
- Register users and issue bearer tokens.
- Store recipes, cuisines and reviews in a relational datastore.
- Keep each recipe's average rating in step with its reviews.
- Answer criteria and free-text recipe searches.
"""
