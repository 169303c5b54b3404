from seating.errors import PolicyViolationError, SeatingError, SeatingInvariantError
from seating.grid import Direction, SeatGrid
from seating.invigilation import InvigilatorAllotment, RoomInvigilators, assign_invigilators
from seating.models import (
	AllocationPolicy,
	Arrangement,
	ArrangementMode,
	EvenType,
	GenerationResult,
	PolicyMode,
	Room,
	RoomKind,
	Student,
)
from seating.orchestrator import SeatingOrchestrator, generate
from seating.validator import ValidationReport, validate_arrangement

__all__ = [
	"AllocationPolicy",
	"Arrangement",
	"ArrangementMode",
	"Direction",
	"EvenType",
	"GenerationResult",
	"InvigilatorAllotment",
	"PolicyMode",
	"PolicyViolationError",
	"Room",
	"RoomInvigilators",
	"RoomKind",
	"SeatGrid",
	"SeatingError",
	"SeatingInvariantError",
	"SeatingOrchestrator",
	"Student",
	"ValidationReport",
	"assign_invigilators",
	"generate",
	"validate_arrangement",
]
