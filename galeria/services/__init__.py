"""
High-level use cases for the Galeria API.

Each service orchestrates a RecordStore to implement business rules (register,
upload, like, cascading delete). Routers call these services instead of
manipulating the JSON files directly.
"""
