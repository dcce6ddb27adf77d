"""SignalGate - crypto signal scanner, Gate & Score engine and order gateway."""

__version__ = "0.1.0"
