"""
Hardware module.

Line transport to the IVA controller, the command sequencer, and the
:class:`Robot` client that ties the protocol and context layers together.
"""

from inovo_control.hardware.robot import Robot
from inovo_control.hardware.sequencer import SequenceContext, Sequencer
from inovo_control.hardware.transport import LineTransport, Transport

__all__ = [
    "LineTransport",
    "Robot",
    "SequenceContext",
    "Sequencer",
    "Transport",
]
