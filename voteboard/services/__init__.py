"""
High-level use cases for the Voteboard API.

Each service orchestrates the store to implement the board's rules
(submission, triage, vote toggling, mock login). Routers call these
services instead of manipulating the JSON document or sessions directly.
"""
