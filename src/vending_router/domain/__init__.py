"""Domain layer: events and the machine store.

Events are immutable.  The store is the single owner of mutable stock
state; handlers reach machines only through it, by id.
"""
