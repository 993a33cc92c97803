from abc import ABC, abstractmethod
from typing import List


class Page_resolver(ABC):
    @abstractmethod
    def resolve(self, page_url: str) -> List[str]:
        """Return the embedded image URLs of a post page; raise NotFound if none."""
        pass
