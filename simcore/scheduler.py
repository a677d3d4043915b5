import heapq
import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional, Tuple

from .models import Customer, ServiceChunk

logger = logging.getLogger(__name__)


class SchedulingError(RuntimeError):
    """Internal inconsistency in the event loop (should never surface)."""


# ---------- Waiting queue and servers ----------
class WaitingQueue:
    """
    Customers waiting for a server, ordered by (priority, index) in
    priority mode and by index (FIFO) otherwise.
    """

    def __init__(self, use_priority: bool):
        self.use_priority = use_priority
        self._heap: List[Tuple[Tuple[int, ...], Customer]] = []

    def _key(self, customer: Customer) -> Tuple[int, ...]:
        if self.use_priority:
            return (customer.priority, customer.index)
        return (customer.index,)

    def push(self, customer: Customer) -> None:
        heapq.heappush(self._heap, (self._key(customer), customer))

    def pop(self) -> Customer:
        return heapq.heappop(self._heap)[1]

    def peek(self) -> Customer:
        return self._heap[0][1]

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)


@dataclass
class Server:
    server_id: int
    customer: Optional[Customer] = None
    chunk_start: int = 0

    @property
    def label(self) -> str:
        return f"S{self.server_id + 1}"

    @property
    def idle(self) -> bool:
        return self.customer is None

    def start(self, customer: Customer, now: int) -> None:
        self.customer = customer
        self.chunk_start = now
        customer.server = self.label
        if customer.service_start is None:
            customer.service_start = now

    def release(self, now: int) -> Tuple[Customer, Optional[ServiceChunk]]:
        """Free the server; the chunk is None when it would be empty."""
        customer = self.customer
        chunk = None
        if now > self.chunk_start:
            chunk = ServiceChunk(label=customer.label, start=self.chunk_start, end=now, server=self.label)
        self.customer = None
        return customer, chunk


def _admit(pending: Deque[Customer], waiting: WaitingQueue, now: int) -> None:
    while pending and pending[0].arrival_time <= now:
        waiting.push(pending.popleft())


# ---------- Single server ----------
def schedule_single_server(customers: List[Customer], use_priority: bool = False) -> List[ServiceChunk]:
    """
    Serve customers on one server. Without priority every customer runs to
    completion in arrival order. With priority a running chunk is cut short
    at the arrival of a customer with a strictly smaller priority number.
    """
    pending: Deque[Customer] = deque(customers)
    waiting = WaitingQueue(use_priority)
    chunks: List[ServiceChunk] = []
    clock = 0
    served = 0
    iterations = 0

    while served < len(customers):
        iterations += 1
        _admit(pending, waiting, clock)

        if not waiting:
            # idle: jump straight to the next arrival
            clock = pending[0].arrival_time
            continue

        customer = waiting.pop()
        if customer.service_start is None:
            customer.service_start = clock

        horizon = customer.remaining
        if use_priority:
            interrupter = next((c for c in pending if c.priority < customer.priority), None)
            if interrupter is not None:
                horizon = min(horizon, interrupter.arrival_time - clock)

        start = clock
        clock += horizon
        customer.remaining -= horizon
        chunks.append(ServiceChunk(label=customer.label, start=start, end=clock))

        if customer.remaining == 0:
            customer.service_end = clock
            served += 1
        else:
            waiting.push(customer)

    logger.debug("single-server loop: %d customers, %d chunks, %d iterations",
                 len(customers), len(chunks), iterations)
    return chunks


# ---------- Multi server ----------
def schedule_multi_server(customers: List[Customer], servers: int, use_priority: bool = False) -> List[ServiceChunk]:
    """
    Serve customers on `servers` parallel servers.

    Each pass: admit arrivals, fill idle servers from the waiting queue,
    then (priority mode) let the best waiting customer displace any occupant
    with a strictly larger priority number, and finally jump to the next
    event, the earliest of the next arrival and every running completion.
    """
    pending: Deque[Customer] = deque(customers)
    waiting = WaitingQueue(use_priority)
    arena = [Server(server_id=i) for i in range(servers)]
    chunks: List[ServiceChunk] = []
    clock = 0
    served = 0
    preemptions = 0

    while served < len(customers):
        _admit(pending, waiting, clock)

        for server in arena:
            if server.idle and waiting:
                server.start(waiting.pop(), clock)

        if use_priority:
            for server in arena:
                if server.idle or not waiting:
                    continue
                if waiting.peek().priority < server.customer.priority:
                    displaced, chunk = server.release(clock)
                    if chunk is not None:
                        chunks.append(chunk)
                    waiting.push(displaced)
                    server.start(waiting.pop(), clock)
                    preemptions += 1

        events = [clock + s.customer.remaining for s in arena if not s.idle]
        if pending:
            events.append(pending[0].arrival_time)
        if not events:
            raise SchedulingError(
                f"no events left at t={clock} with {len(customers) - served} customers unserved")

        next_event = min(events)
        horizon = next_event - clock

        for server in arena:
            if server.idle:
                continue
            server.customer.remaining -= horizon
            if server.customer.remaining <= 0:
                done, chunk = server.release(next_event)
                if chunk is not None:
                    chunks.append(chunk)
                done.service_end = next_event
                served += 1

        clock = next_event

    logger.debug("multi-server loop: %d customers on %d servers, %d chunks, %d preemptions",
                 len(customers), servers, len(chunks), preemptions)
    return chunks
