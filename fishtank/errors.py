"""
Error taxonomy for the fish tank simulation.

CommandRejected subclasses are expected, user-facing rejections: the command
leaves state unchanged and the caller decides how to surface it.
"""


class FishTankError(Exception):
    """Base class for simulation errors"""
    pass


class UnknownSpecies(FishTankError):
    """Raised when a species id is not registered in the catalog"""

    def __init__(self, species_id: str):
        super().__init__(f"Unknown species: {species_id}")
        self.species_id = species_id


class CorruptedSaveData(FishTankError):
    """Raised when a stored save is present but cannot be parsed"""
    pass


class PersistenceWriteFailure(FishTankError):
    """Raised by stores when a write does not complete"""
    pass


# ============================================================================
# Command Rejections
# ============================================================================

class CommandRejected(FishTankError):
    """Base class for rejected player commands"""
    pass


class InsufficientFunds(CommandRejected):
    """Raised when a debit exceeds the coin balance"""

    def __init__(self, required: int, available: int):
        super().__init__(f"Need {required} coins, have {available}")
        self.required = required
        self.available = available


class SpeciesExclusivityViolation(CommandRejected):
    """Raised when buying a second living aggressive creature"""
    pass


class TankFull(CommandRejected):
    """Raised when the living population is at capacity"""
    pass


class UnknownDecoration(CommandRejected):
    """Raised when a decoration id is not in the decoration table"""
    pass


class DuplicateDecoration(CommandRejected):
    """Raised when a decoration is already installed"""
    pass


class CreatureNotFound(CommandRejected):
    """Raised when no creature has the given id"""
    pass


class CreatureStillAlive(CommandRejected):
    """Raised when disposing a creature that is still alive"""
    pass


class ConfirmationRequired(CommandRejected):
    """Raised when a destructive command is issued without confirmation"""
    pass


class NoActiveEvent(CommandRejected):
    """Raised when resolving an event while none is active"""
    pass


class InvalidEventOption(CommandRejected):
    """Raised when an event option index is out of range"""
    pass
