from .base import (
	BatchConflictResult,
	CollaboratorError,
	ConflictSource,
	ConflictSourceError,
	SettingsProvider,
	SettingsProviderError,
	SlotQuery,
	TaskRepository,
	TaskRepositoryError,
)
from .factory import get_conflict_source
from .memory import (
	InMemoryConflictSource,
	InMemoryTaskRepository,
	NullConflictSource,
	StaticSettingsProvider,
)

__all__ = [
	"BatchConflictResult",
	"CollaboratorError",
	"ConflictSource",
	"ConflictSourceError",
	"SettingsProvider",
	"SettingsProviderError",
	"SlotQuery",
	"TaskRepository",
	"TaskRepositoryError",
	"get_conflict_source",
	"InMemoryConflictSource",
	"InMemoryTaskRepository",
	"NullConflictSource",
	"StaticSettingsProvider",
]
