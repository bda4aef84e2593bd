"""Core (UI-agnostic) campaign dashboard logic.

This package contains:
- sample data and value coercion helpers
- upload parsing (CSV / XLSX -> row mappings) and row normalization
- the dashboard store (the single mutable dataset)
- filter normalization
- aggregate views and the campaign table projection (JSON-serializable payloads)
- export helpers (CSV / XLSX bytes)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
