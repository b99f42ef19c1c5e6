"""
Conflict Source Factory

Factory pattern to get the conflict source for a configured backend.
"""

from .base import ConflictSource


def get_conflict_source(kind: str, **kwargs) -> ConflictSource:
	"""
	Factory para obtener la fuente de conflictos según backend.

	Args:
		kind: "memory" o "none"
		**kwargs: argumentos del constructor (ej. events=[...] para "memory")

	Returns:
		ConflictSource: instancia de la fuente

	Raises:
		ValueError: si kind no es soportado
	"""
	if kind == "memory":
		from .memory import InMemoryConflictSource
		return InMemoryConflictSource(**kwargs)
	elif kind == "none":
		from .memory import NullConflictSource
		return NullConflictSource()
	else:
		raise ValueError(f"Unsupported conflict source: {kind}")
