"""
Shared, cross-cutting code for the API.

`core/` holds small building blocks the feature packages lean on
(DB wiring, environment settings, logging). Person rules, SQL and HTTP
translation live in `people/`.
"""
