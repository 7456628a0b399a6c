"""
Shared, cross-cutting code for the API.

`core/` should contain small building blocks that features use
(DB wiring, settings, logging, error types). Keep feature-specific SQL and
validation rules in the corresponding feature package (e.g. `products/`).
"""
