"""
Personalized recommendation engine.

Responsibilities:
- Extract boolean feature tokens from each restaurant and its menu items.
- Derive the restaurants a user implicitly likes from their food lists.
- Fit a Laplace-smoothed Naive Bayes model per user and request.
- Score and rank the restaurants the user has not liked yet.
"""
