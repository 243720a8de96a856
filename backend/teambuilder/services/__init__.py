"""Services Layer — stores, team aggregate, invitation workflow, and satellite resources.

Invariants:
    - Stores (membership_store, invitation_ledger) flush but never commit
    - Aggregate/workflow mutations each run in exactly one unit_of_work
    - Public aggregate/workflow mutations return OperationResult; they never raise
      TeamBuilderError at the caller

Design Decisions:
    - One file per component for locality; rule checks live in core/membership_rules
"""
