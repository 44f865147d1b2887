"""Save-state codec and on-disk save states.

Typical usage:
    from towersim.persistence import SaveState

    tower = SaveState().load("saves/default")
"""

from towersim.persistence.codec import (
    MalformedSaveError,
    create_control_tower,
    decode_aircraft,
    decode_aircraft_list,
    decode_gate,
    decode_queues,
    decode_task,
    decode_task_list,
    decode_terminal_header,
    decode_terminals,
    decode_tick,
    encode_aircraft_list,
    encode_loading_aircraft,
    encode_queues,
    encode_terminals,
    encode_tick,
)
from towersim.persistence.save_state import SaveState

__all__ = [
    "MalformedSaveError",
    "SaveState",
    "create_control_tower",
    "decode_aircraft",
    "decode_aircraft_list",
    "decode_gate",
    "decode_queues",
    "decode_task",
    "decode_task_list",
    "decode_terminal_header",
    "decode_terminals",
    "decode_tick",
    "encode_aircraft_list",
    "encode_loading_aircraft",
    "encode_queues",
    "encode_terminals",
    "encode_tick",
]
