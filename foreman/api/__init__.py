"""
Foreman REST API.

Provides DRF ViewSets for:
- Recipe, Product (read-only, plus validate-steps / snapshot actions)
- Project (full CRUD + lifecycle actions)
- Task, RecipeSnapshot, ProductSnapshot (read-only)
"""
