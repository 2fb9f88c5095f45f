"""Service layer — operations over the domain returning ServiceResult.

Services may import from domain and config layers.
They must never import from commands or output.
"""
