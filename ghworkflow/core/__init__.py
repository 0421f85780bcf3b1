"""Core reconciliation engine — models, catalogues, planning, execution."""
