"""
Inovo Control Package.

Client-side command layer for Inovo robot arms.  Talks to the IVA
runtime over a line-oriented TCP socket for motion, motion parameters,
gripper, digital IO and data queries, and wraps reversible operations
in a LIFO context stack with scope guards.

Subpackages:
    geometry: Cartesian and joint poses with their algebra
    protocol: Command/instruction model, motion parameters, wire codec
    context: Context machine, scope guards, built-in reversible contexts
    hardware: Line transport, command sequencer, robot client
    configs: Client configuration loading and validation
"""

__version__ = "0.1.0"

__all__ = ["geometry", "protocol", "context", "hardware", "configs"]
