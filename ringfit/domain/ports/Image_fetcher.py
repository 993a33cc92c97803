from abc import ABC, abstractmethod

from ringfit.domain.schemas.image_data import ImageData


class Image_fetcher(ABC):
    @abstractmethod
    def fetch(self, image_url: str) -> ImageData:
        pass
