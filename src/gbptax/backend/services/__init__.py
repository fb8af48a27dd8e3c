"""Service-layer helpers for the gbptax backend.

Submodules are imported directly (``services.calculation_service``,
``services.calculators``) so that the calculators stay importable without
pulling in the web layer.
"""
