"""
Dish matching engine.

Responsibilities:
- Compute great-circle distances and narrow restaurants to a search radius.
- Score candidate dishes against a target dish description.
- Rank, threshold and price-filter the scored candidates.
- Compose the store lookups and the engine into one search workflow.
"""
