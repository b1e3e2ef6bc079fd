"""Modelos y entidades del dominio.

Por qué:
- Aquí viven las estructuras puras (Pydantic v2): textos traducidos, precios,
  estadísticas de migración.
- El dominio no conoce HTTP, CLI ni el almacén de documentos.
"""
