"""Text codec for control tower save states.

A save state is made of four independent text streams:

tick
    One line holding the number of ticks elapsed.
aircraft
    A count line, then one ``callsign:model:tasks:fuel:emergency:cargo`` line
    per aircraft.
terminals
    A count line, then per terminal a ``Kind:number:emergency:gateCount``
    header followed by one ``gateNumber:callsign`` (or ``gateNumber:empty``)
    line per gate.
queues
    A ``TakeoffQueue:count`` block, a ``LandingQueue:count`` block and a
    ``LoadingAircraft:count`` block. Each non-empty block is followed by one
    comma-separated line of callsigns (or ``callsign:ticks`` pairs for the
    loading block).

Decoding is strict: anything that does not match the grammar raises
``MalformedSaveError`` and no partially built world is returned. Decoders
operate on strings only and have no side effects.

Typical usage:
    from towersim.persistence.codec import create_control_tower, encode_queues

    tower = create_control_tower(tick_text, aircraft_text, terminals_text, queues_text)
    tower.tick()
    queues_text = encode_queues(tower)
"""

import logging
import math
import re

from towersim.aircraft.aircraft import Aircraft
from towersim.aircraft.characteristics import AircraftCharacteristics
from towersim.control.control_tower import ControlTower
from towersim.control.queues import AircraftQueue, LandingQueue, TakeoffQueue
from towersim.ground.gate import Gate, NoSpaceError
from towersim.ground.terminal import MAX_NUM_GATES, Terminal, TerminalKind
from towersim.tasks.task import Task, TaskType
from towersim.tasks.task_list import TaskList

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = ":"
LIST_SEPARATOR = ","
LOAD_PERCENT_SEPARATOR = "@"
EMPTY_GATE = "empty"
LOADING_AIRCRAFT = "LoadingAircraft"

AIRCRAFT_FIELD_COUNT = 6
TERMINAL_FIELD_COUNT = 4

_INTEGER = re.compile(r"[+-]?[0-9]+")
_DECIMAL = re.compile(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?")


class MalformedSaveError(Exception):
    """Raised when a save stream does not match the expected format."""


class _SaveLines:
    """Line cursor over one save stream."""

    def __init__(self, text: str, stream: str) -> None:
        self._lines = text.splitlines()
        self._position = 0
        self.stream = stream

    def next(self, expected: str) -> str:
        """Return the next line, failing if the stream has ended."""
        if self._position >= len(self._lines):
            raise MalformedSaveError(
                f"{self.stream} stream ended early, expected {expected}"
            )
        line = self._lines[self._position]
        self._position += 1
        return line

    def expect_end(self) -> None:
        """Fail if any line remains unread."""
        if self._position < len(self._lines):
            raise MalformedSaveError(
                f"{self.stream} stream has unexpected content on line {self._position + 1}"
            )


def _parse_int(text: str, what: str) -> int:
    if not _INTEGER.fullmatch(text):
        raise MalformedSaveError(f"{what} is not an integer: {text!r}")
    return int(text)


def _parse_count(text: str, what: str) -> int:
    count = _parse_int(text, what)
    if count < 0:
        raise MalformedSaveError(f"{what} cannot be negative: {count}")
    return count


def _parse_float(text: str, what: str) -> float:
    if not _DECIMAL.fullmatch(text):
        raise MalformedSaveError(f"{what} is not a number: {text!r}")
    value = float(text)
    if not math.isfinite(value):
        raise MalformedSaveError(f"{what} is out of range: {text!r}")
    return value


def _parse_bool(text: str, what: str) -> bool:
    if text == "true":
        return True
    if text == "false":
        return False
    raise MalformedSaveError(f"{what} must be 'true' or 'false': {text!r}")


def _split_fields(line: str, separator: str, count: int, what: str) -> list[str]:
    """Split a record into exactly ``count`` non-empty fields."""
    if line.endswith(separator):
        raise MalformedSaveError(f"{what} has a trailing {separator!r}: {line!r}")
    fields = line.split(separator)
    if len(fields) != count:
        raise MalformedSaveError(
            f"{what} must have {count} fields separated by {separator!r}: {line!r}"
        )
    if any(not field for field in fields):
        raise MalformedSaveError(f"{what} has an empty field: {line!r}")
    return fields


def _split_list(line: str, count: int, what: str) -> list[str]:
    """Split a comma-separated list that must hold exactly ``count`` items."""
    return _split_fields(line, LIST_SEPARATOR, count, what)


def _index_by_callsign(aircraft: list[Aircraft]) -> dict[str, Aircraft]:
    return {each.callsign: each for each in aircraft}


def _resolve(callsign: str, known: dict[str, Aircraft]) -> Aircraft:
    try:
        return known[callsign]
    except KeyError as e:
        raise MalformedSaveError(f"Unknown aircraft callsign: {callsign!r}") from e


# Decoding


def decode_tick(text: str) -> int:
    """Decode the tick stream.

    Args:
        text: Stream content

    Returns:
        Ticks elapsed (non-negative)

    Raises:
        MalformedSaveError: If the stream is not a single non-negative integer
    """
    lines = _SaveLines(text, "tick")
    ticks = _parse_count(lines.next("a tick count"), "Tick count")
    lines.expect_end()
    return ticks


def decode_task(text: str) -> Task:
    """Decode one task, ``TYPE`` or ``LOAD@percent``.

    Raises:
        MalformedSaveError: If the task type is unknown or the load percentage
            is missing, invalid or given for a task other than LOAD
    """
    parts = text.split(LOAD_PERCENT_SEPARATOR)
    if len(parts) > 2:
        raise MalformedSaveError(f"Task has more than one load percentage: {text!r}")

    try:
        task_type = TaskType[parts[0]]
    except KeyError as e:
        raise MalformedSaveError(f"Unknown task type: {parts[0]!r}") from e

    if task_type != TaskType.LOAD:
        if len(parts) != 1:
            raise MalformedSaveError(f"Only LOAD tasks carry a load percentage: {text!r}")
        return Task(task_type)

    if len(parts) != 2:
        raise MalformedSaveError(f"LOAD task is missing its load percentage: {text!r}")
    load_percent = _parse_int(parts[1], "Load percentage")
    if load_percent < 0:
        raise MalformedSaveError(f"Load percentage cannot be negative: {load_percent}")
    return Task(task_type, load_percent)


def decode_task_list(text: str) -> TaskList:
    """Decode a comma-separated task list, current task first.

    Raises:
        MalformedSaveError: If any task is malformed or the sequence is illegal
    """
    if not text or text.endswith(LIST_SEPARATOR):
        raise MalformedSaveError(f"Task list is empty or has a trailing ',': {text!r}")

    tokens = text.split(LIST_SEPARATOR)
    if any(not token for token in tokens):
        raise MalformedSaveError(f"Task list has an empty task: {text!r}")

    tasks = [decode_task(token) for token in tokens]
    try:
        return TaskList(tasks)
    except ValueError as e:
        raise MalformedSaveError(str(e)) from e


def decode_aircraft(line: str) -> Aircraft:
    """Decode one aircraft record.

    The cargo field counts passengers when the model carries passengers and
    kilograms of freight otherwise.

    Args:
        line: ``callsign:model:tasks:fuel:emergency:cargo``

    Returns:
        The decoded aircraft

    Raises:
        MalformedSaveError: If any field is malformed or out of bounds
    """
    callsign, model, tasks, fuel, emergency, cargo = _split_fields(
        line, FIELD_SEPARATOR, AIRCRAFT_FIELD_COUNT, "Aircraft record"
    )

    try:
        characteristics = AircraftCharacteristics[model]
    except KeyError as e:
        raise MalformedSaveError(f"Unknown aircraft model: {model!r}") from e

    task_list = decode_task_list(tasks)
    fuel_amount = _parse_float(fuel, "Fuel amount")
    has_emergency = _parse_bool(emergency, "Emergency flag")
    cargo_amount = _parse_int(cargo, "Cargo amount")

    try:
        return Aircraft(
            callsign,
            characteristics,
            task_list,
            fuel_amount,
            cargo_amount,
            emergency=has_emergency,
        )
    except ValueError as e:
        raise MalformedSaveError(f"Invalid aircraft {callsign}: {e}") from e


def decode_aircraft_list(text: str) -> list[Aircraft]:
    """Decode the aircraft stream.

    Raises:
        MalformedSaveError: If the count disagrees with the records, a record is
            malformed or a callsign appears twice
    """
    lines = _SaveLines(text, "aircraft")
    count = _parse_count(lines.next("an aircraft count"), "Aircraft count")

    aircraft: list[Aircraft] = []
    seen: set[str] = set()
    for index in range(count):
        decoded = decode_aircraft(lines.next(f"aircraft {index + 1} of {count}"))
        if decoded.callsign in seen:
            raise MalformedSaveError(f"Duplicate aircraft callsign: {decoded.callsign}")
        seen.add(decoded.callsign)
        aircraft.append(decoded)

    lines.expect_end()
    return aircraft


def decode_gate(line: str, aircraft: list[Aircraft]) -> Gate:
    """Decode one gate record, parking the referenced aircraft at it.

    Args:
        line: ``gateNumber:callsign`` or ``gateNumber:empty``
        aircraft: Aircraft already decoded, used to resolve the callsign

    Raises:
        MalformedSaveError: If the gate number is invalid or the callsign unknown
    """
    number, occupant = _split_fields(line, FIELD_SEPARATOR, 2, "Gate record")
    gate_number = _parse_int(number, "Gate number")
    if gate_number < 1:
        raise MalformedSaveError(f"Gate number must be at least 1: {gate_number}")

    gate = Gate(gate_number)
    if occupant != EMPTY_GATE:
        gate.park_aircraft(_resolve(occupant, _index_by_callsign(aircraft)))
    return gate


def decode_terminal_header(line: str) -> tuple[Terminal, int]:
    """Decode a terminal header line.

    Args:
        line: ``Kind:number:emergency:gateCount``

    Returns:
        The terminal, with no gates yet, and the number of gate lines to follow

    Raises:
        MalformedSaveError: If the kind is unknown or a number is out of bounds
    """
    kind_name, number, emergency, gates = _split_fields(
        line, FIELD_SEPARATOR, TERMINAL_FIELD_COUNT, "Terminal header"
    )

    try:
        kind = TerminalKind(kind_name)
    except ValueError as e:
        raise MalformedSaveError(f"Unknown terminal kind: {kind_name!r}") from e

    terminal_number = _parse_int(number, "Terminal number")
    if terminal_number < 1:
        raise MalformedSaveError(f"Terminal number must be at least 1: {terminal_number}")

    has_emergency = _parse_bool(emergency, "Emergency flag")

    gate_count = _parse_count(gates, "Gate count")
    if gate_count > MAX_NUM_GATES:
        raise MalformedSaveError(
            f"Terminal cannot hold {gate_count} gates (maximum {MAX_NUM_GATES})"
        )

    return Terminal(kind, terminal_number, emergency=has_emergency), gate_count


def decode_terminals(text: str, aircraft: list[Aircraft]) -> list[Terminal]:
    """Decode the terminals stream.

    Args:
        text: Stream content
        aircraft: Aircraft already decoded, used to resolve gate occupants

    Raises:
        MalformedSaveError: If a count disagrees with the records, a record is
            malformed, a gate number repeats or an aircraft is at two gates
    """
    lines = _SaveLines(text, "terminals")
    count = _parse_count(lines.next("a terminal count"), "Terminal count")

    terminals: list[Terminal] = []
    gate_numbers: set[int] = set()
    parked: set[str] = set()
    for index in range(count):
        terminal, gate_count = decode_terminal_header(
            lines.next(f"terminal {index + 1} of {count}")
        )
        for gate_index in range(gate_count):
            gate = decode_gate(
                lines.next(f"gate {gate_index + 1} of {gate_count} in {terminal}"), aircraft
            )
            if gate.gate_number in gate_numbers:
                raise MalformedSaveError(f"Duplicate gate number: {gate.gate_number}")
            gate_numbers.add(gate.gate_number)

            occupant = gate.aircraft_at_gate
            if occupant is not None:
                if occupant.callsign in parked:
                    raise MalformedSaveError(f"{occupant.callsign} is parked at two gates")
                parked.add(occupant.callsign)

            try:
                terminal.add_gate(gate)
            except NoSpaceError as e:
                raise MalformedSaveError(str(e)) from e
        terminals.append(terminal)

    lines.expect_end()
    return terminals


def _read_header(lines: _SaveLines, kind: str) -> int:
    line = lines.next(f"a {kind} header")
    name, count = _split_fields(line, FIELD_SEPARATOR, 2, f"{kind} header")
    if name != kind:
        raise MalformedSaveError(f"Expected a {kind} header, found {name!r}")
    return _parse_count(count, f"{kind} count")


def _read_queue(lines: _SaveLines, known: dict[str, Aircraft], queue: AircraftQueue) -> None:
    count = _read_header(lines, queue.name)
    if count == 0:
        return

    for callsign in _split_list(lines.next(f"{queue.name} callsigns"), count, queue.name):
        aircraft = _resolve(callsign, known)
        if queue.contains(aircraft):
            raise MalformedSaveError(f"{callsign} appears twice in {queue.name}")
        queue.add(aircraft)


def _read_loading_aircraft(lines: _SaveLines, known: dict[str, Aircraft]) -> dict[Aircraft, int]:
    count = _read_header(lines, LOADING_AIRCRAFT)
    loading: dict[Aircraft, int] = {}
    if count == 0:
        return loading

    for pair in _split_list(lines.next("loading aircraft"), count, LOADING_AIRCRAFT):
        callsign, ticks = _split_fields(pair, FIELD_SEPARATOR, 2, "Loading aircraft entry")
        aircraft = _resolve(callsign, known)
        if aircraft in loading:
            raise MalformedSaveError(f"{callsign} appears twice in {LOADING_AIRCRAFT}")

        ticks_remaining = _parse_int(ticks, "Ticks remaining")
        if ticks_remaining < 1:
            raise MalformedSaveError(
                f"Ticks remaining for {callsign} must be at least 1: {ticks_remaining}"
            )
        loading[aircraft] = ticks_remaining

    return loading


def decode_queues(
    text: str, aircraft: list[Aircraft]
) -> tuple[TakeoffQueue, LandingQueue, dict[Aircraft, int]]:
    """Decode the queues stream.

    Args:
        text: Stream content
        aircraft: Aircraft already decoded, used to resolve callsigns

    Returns:
        Takeoff queue, landing queue and loading aircraft mapped to ticks remaining

    Raises:
        MalformedSaveError: If a block is missing, out of order or malformed
    """
    lines = _SaveLines(text, "queues")
    known = _index_by_callsign(aircraft)

    takeoff_queue = TakeoffQueue()
    landing_queue = LandingQueue()
    _read_queue(lines, known, takeoff_queue)
    _read_queue(lines, known, landing_queue)
    loading = _read_loading_aircraft(lines, known)

    lines.expect_end()
    return takeoff_queue, landing_queue, loading


def create_control_tower(
    tick_text: str, aircraft_text: str, terminals_text: str, queues_text: str
) -> ControlTower:
    """Build a control tower from the four save streams.

    Streams are decoded in order: tick, aircraft, terminals, queues. Terminals
    and queues refer to aircraft by callsign, so aircraft come first.

    Raises:
        MalformedSaveError: If any stream is malformed; nothing is returned
    """
    ticks = decode_tick(tick_text)
    aircraft = decode_aircraft_list(aircraft_text)
    terminals = decode_terminals(terminals_text, aircraft)
    takeoff_queue, landing_queue, loading = decode_queues(queues_text, aircraft)

    tower = ControlTower(ticks, aircraft, landing_queue, takeoff_queue, loading)
    for terminal in terminals:
        tower.add_terminal(terminal)

    logger.info(
        "Restored control tower at tick %d: %d aircraft, %d terminals",
        ticks,
        len(aircraft),
        len(terminals),
    )
    return tower


# Encoding


def encode_tick(tower: ControlTower) -> str:
    """Encode the tick stream."""
    return str(tower.ticks_elapsed)


def encode_aircraft_list(tower: ControlTower) -> str:
    """Encode the aircraft stream, in the order aircraft were added."""
    aircraft = tower.aircraft
    return "\n".join([str(len(aircraft))] + [each.encode() for each in aircraft])


def encode_terminals(tower: ControlTower) -> str:
    """Encode the terminals stream, in the order terminals were added."""
    terminals = tower.terminals
    return "\n".join([str(len(terminals))] + [terminal.encode() for terminal in terminals])


def encode_loading_aircraft(loading: dict[Aircraft, int]) -> str:
    """Encode the loading block, ordered by callsign."""
    ordered = sorted(loading.items(), key=lambda item: item[0].callsign)
    header = f"{LOADING_AIRCRAFT}:{len(ordered)}"
    if not ordered:
        return header
    pairs = LIST_SEPARATOR.join(f"{aircraft.callsign}:{ticks}" for aircraft, ticks in ordered)
    return header + "\n" + pairs


def encode_queues(tower: ControlTower) -> str:
    """Encode the queues stream: takeoff, landing, then loading aircraft."""
    return "\n".join(
        [
            tower.takeoff_queue.encode(),
            tower.landing_queue.encode(),
            encode_loading_aircraft(tower.loading_aircraft),
        ]
    )
