"""Services Layer — orchestration of stores, validators and collaborators.

Invariants:
    - Services call core/ pure rules before every write (validate eagerly, then persist)
    - Services never build HTTP responses; they return result dicts or raise JournalError

Design Decisions:
    - One service class per aggregate (settings catalog, journal entries, users)
      with collaborators injected through the constructor
"""
