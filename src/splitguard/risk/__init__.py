from .ledger import Position, PositionLedger

__all__ = ["Position", "PositionLedger"]
