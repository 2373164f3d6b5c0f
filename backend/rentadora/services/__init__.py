# Services package init
"""
Rentadora API - Services Layer
===============================

What:  Business logic between the routes (HTTP) and the document store.

Service Inventory:
    - DocumentStore (abstract): get / insert / merge_update / delete by
      (collection, id)
    - SQLDocumentStore: documents table through async SQLAlchemy
    - InMemoryDocumentStore: process-local dicts for tests and local runs
    - ResourceService: the CRUD template, one instance per resource
"""
