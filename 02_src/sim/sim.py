"""SIM implementation - hardcoded colony workload for exercising the profiler."""

from types import SimpleNamespace
from typing import Protocol

from tickprof.instrument import Instrumenter
from tickprof.logging_config import get_logger

logger = get_logger(__name__)


def _burn(rounds: int) -> int:
    """Deterministic busy work standing in for real game logic."""
    total = 0
    for i in range(rounds):
        total = (total + i * i) % 1_000_003
    return total


def build_types() -> tuple[type, type]:
    """Fresh Colony/Worker classes, so each SIM instruments its own copies."""

    class Colony:
        """Energy store shared by workers."""

        def __init__(self, name: str):
            self.name = name
            self._energy = 0

        @property
        def energy(self) -> int:
            return self._energy

        @energy.setter
        def energy(self, value: int) -> None:
            self._energy = max(0, value)

        def harvest(self, amount: int) -> int:
            self.energy = self.energy + amount
            return self.energy

        def spend(self, amount: int) -> bool:
            if self.energy < amount:
                return False
            self.energy = self.energy - amount
            return True

    class Worker:
        """Harvests for a colony every turn."""

        def __init__(self, colony: Colony, rounds: int):
            self.colony = colony
            self.rounds = rounds

        @staticmethod
        def cost(rounds: int) -> int:
            return rounds // 10

        def work(self) -> int:
            _burn(self.rounds)
            gained = self.colony.harvest(self.rounds)
            self.colony.spend(Worker.cost(self.rounds))
            return gained

    return Colony, Worker


class ISim(Protocol):
    """Generate profiler load. In Iteration 1: hardcoded scenario."""

    def setup(self) -> None:
        """Instrument the workload."""
        ...

    def step(self) -> None:
        """Run one turn of work."""
        ...


class Sim:
    """SIM with a hardcoded colony scenario."""

    def __init__(
        self,
        instrumenter: Instrumenter,
        worker_count: int = 3,
        rounds: int = 2000,
    ):
        self._instrumenter = instrumenter
        self._worker_count = worker_count
        self._rounds = rounds
        self._turn = 0

        self.colony = None
        self.workers: list = []
        self.helpers = SimpleNamespace(plan=self._plan)

    def setup(self) -> None:
        """Instrument the workload."""
        colony_cls, worker_cls = build_types()

        self._instrumenter.register_class(colony_cls, "Colony")
        self._instrumenter.register_class(worker_cls, "Worker")
        self._instrumenter.register_object(self.helpers, "helpers")

        self.colony = colony_cls("home")
        self.workers = [
            worker_cls(self.colony, self._rounds * (i + 1))
            for i in range(self._worker_count)
        ]
        logger.info("SIM ready with %s workers", len(self.workers))

    def step(self) -> None:
        """Run one turn of work."""
        if self.colony is None:
            raise RuntimeError("SIM not set up")

        self._turn += 1
        with self._instrumenter.scope("sim.turn", {"turn": self._turn}):
            for worker in self.helpers.plan():
                worker.work()

        logger.debug("SIM turn %s: energy=%s", self._turn, self.colony.energy)

    def _plan(self) -> list:
        """Workers scheduled this turn, cheapest first."""
        return sorted(self.workers, key=lambda worker: worker.rounds)
