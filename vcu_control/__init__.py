"""Vehicle control unit logic: status word, CAN payloads, pedals, launch and traction control."""

__version__ = "0.1.0"