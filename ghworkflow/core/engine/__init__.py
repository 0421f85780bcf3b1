"""
Reconciliation engine.

Flow:
    inspect_state → ObservedState
    compute_desired → DesiredState
    build_plan(observed, desired) → Plan
    execute_plan(plan) → ExecutionResult
"""
