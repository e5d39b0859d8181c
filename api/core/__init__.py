"""
Shared, cross-cutting code for the API.

`core/` should contain small building blocks that features use
(DB pool wiring, logging). Keep feature-specific SQL in the corresponding
feature package (e.g. `products/`).
"""
