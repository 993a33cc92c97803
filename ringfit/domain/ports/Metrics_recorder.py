from abc import ABC, abstractmethod


class Metrics_recorder(ABC):
    @abstractmethod
    def record(self, graph_id: str, date: str, value: str) -> None:
        """Store ``value`` for ``date`` (YYYYMMDD) on a graph; raise RecordError on failure."""
        pass
