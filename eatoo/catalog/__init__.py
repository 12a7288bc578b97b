"""
Catalog layer.

Responsibilities:
- Read flat restaurant, menu, item and food list records from a source.
- Normalize loosely-shaped records into typed catalog entities.
- Assemble the restaurant -> menu -> item graph used by the recommender.
"""
