"""
Hit Songs API — Services Layer
===============================

What:  Everything between the routes (HTTP) and the remote database.

Service Inventory:
    - parameters:        Parameter Validator (mood count parsing)
    - catalog:           Query Dispatcher (query builders, sort remap, dispatch)
    - query_base:        QueryBackend interface + Selection / ProcedureCall
    - supabase_backend:  QueryBackend over the async supabase client
"""
