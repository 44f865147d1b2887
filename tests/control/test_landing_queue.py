"""Tests for the priority-ranked landing queue."""

from towersim.aircraft.characteristics import AircraftCharacteristics
from towersim.control.queues import LandingQueue

B747F = AircraftCharacteristics.BOEING_747_8F


class TestLandingQueueBasics:
    """Test adding, peeking and removing."""

    def test_empty_queue(self) -> None:
        """Test an empty queue returns None and ranks nothing."""
        queue = LandingQueue()
        assert queue.peek() is None
        assert queue.remove() is None
        assert queue.aircraft_in_order() == []
        assert len(queue) == 0

    def test_contains(self, make_aircraft) -> None:
        """Test membership uses aircraft identity."""
        queue = LandingQueue()
        queue.add(make_aircraft("QFA481"))
        assert queue.contains(make_aircraft("QFA481"))
        assert make_aircraft("QFA481") in queue
        assert not queue.contains(make_aircraft("VOZ1"))

    def test_adding_twice_keeps_one_entry(self, make_aircraft) -> None:
        """Test the same aircraft is only queued once."""
        queue = LandingQueue()
        aircraft = make_aircraft("QFA481")
        queue.add(aircraft)
        queue.add(aircraft)
        assert len(queue) == 1


class TestLandingQueuePriority:
    """Test the priority rules and their tie-breaks."""

    def test_emergency_beats_earlier_freighters(self, make_aircraft) -> None:
        """Test an emergency lands first, then the longest-waiting freighter."""
        freight_a = make_aircraft("FRTA", B747F)
        freight_b = make_aircraft("FRTB", B747F)
        emergency_c = make_aircraft("EMGC", B747F, emergency=True)

        queue = LandingQueue()
        for aircraft in (freight_a, freight_b, emergency_c):
            queue.add(aircraft)

        assert queue.peek() is emergency_c
        assert queue.remove() is emergency_c
        assert queue.peek() is freight_a

    def test_earliest_emergency_wins(self, make_aircraft) -> None:
        """Test arrival order breaks ties between emergencies."""
        queue = LandingQueue()
        queue.add(make_aircraft("PAX1"))
        first = make_aircraft("EMG1", B747F, fuel=100.0, emergency=True)
        second = make_aircraft("EMG2", emergency=True)
        queue.add(first)
        queue.add(second)
        assert queue.peek() is first

    def test_emergency_beats_critical_fuel(self, make_aircraft) -> None:
        """Test an emergency outranks an aircraft that is nearly out of fuel."""
        queue = LandingQueue()
        low_fuel = make_aircraft("LOW1", fuel=100.0)
        emergency = make_aircraft("EMG1", B747F, emergency=True)
        queue.add(low_fuel)
        queue.add(emergency)
        assert queue.peek() is emergency

    def test_critical_fuel_beats_passengers(self, make_aircraft) -> None:
        """Test a freighter at 20% fuel outranks a passenger aircraft."""
        queue = LandingQueue()
        passengers = make_aircraft("PAX1")
        low_fuel = make_aircraft("LOW1", B747F, fuel=B747F.fuel_capacity * 0.2)
        queue.add(passengers)
        queue.add(low_fuel)
        assert queue.peek() is low_fuel

    def test_fuel_just_above_critical_does_not_count(self, make_aircraft) -> None:
        """Test a freighter at 21% fuel gets no fuel priority."""
        queue = LandingQueue()
        passengers = make_aircraft("PAX1")
        freighter = make_aircraft("FRT1", B747F, fuel=B747F.fuel_capacity * 0.21)
        queue.add(freighter)
        queue.add(passengers)
        assert freighter.fuel_percent_remaining == 21
        assert queue.peek() is passengers

    def test_passengers_beat_freight(self, make_aircraft) -> None:
        """Test any passenger aircraft outranks freighters that arrived first."""
        queue = LandingQueue()
        queue.add(make_aircraft("FRT1", B747F))
        passengers = make_aircraft("PAX1")
        queue.add(passengers)
        assert queue.peek() is passengers

    def test_priority_is_re_evaluated_on_read(self, make_aircraft) -> None:
        """Test declaring an emergency after queueing changes the front."""
        queue = LandingQueue()
        first = make_aircraft("FRT1", B747F)
        later = make_aircraft("FRT2", B747F)
        queue.add(first)
        queue.add(later)
        assert queue.peek() is first

        later.declare_emergency()
        assert queue.peek() is later


class TestLandingQueueOrdering:
    """Test the full ranking and its representations."""

    def test_aircraft_in_order(self, make_aircraft) -> None:
        """Test the ranking applies every rule to the remaining aircraft."""
        freighter = make_aircraft("FRT1", B747F)
        passengers = make_aircraft("PAX1")
        low_fuel = make_aircraft("LOW1", B747F, fuel=1000.0)
        emergency = make_aircraft("EMG1", emergency=True)
        second_freighter = make_aircraft("FRT2", B747F)

        queue = LandingQueue()
        for aircraft in (freighter, passengers, low_fuel, emergency, second_freighter):
            queue.add(aircraft)

        assert [a.callsign for a in queue.aircraft_in_order()] == [
            "EMG1",
            "LOW1",
            "PAX1",
            "FRT1",
            "FRT2",
        ]

    def test_aircraft_in_order_is_a_snapshot(self, make_aircraft) -> None:
        """Test ranking leaves the queue contents unchanged."""
        queue = LandingQueue()
        queue.add(make_aircraft("FRT1", B747F))
        queue.add(make_aircraft("PAX1"))

        ranked = queue.aircraft_in_order()
        ranked.clear()

        assert len(queue) == 2
        assert queue.peek().callsign == "PAX1"

    def test_str_and_encode_use_ranking(self, make_aircraft) -> None:
        """Test both forms list callsigns in priority order."""
        queue = LandingQueue()
        queue.add(make_aircraft("FRT1", B747F))
        queue.add(make_aircraft("PAX1"))

        assert str(queue) == "LandingQueue [PAX1, FRT1]"
        assert queue.encode() == "LandingQueue:2\nPAX1,FRT1"

    def test_encode_empty(self) -> None:
        """Test an empty queue encodes to its header alone."""
        assert LandingQueue().encode() == "LandingQueue:0"
        assert str(LandingQueue()) == "LandingQueue []"
