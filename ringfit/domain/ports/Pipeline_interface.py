from abc import ABC, abstractmethod
from typing import Optional

from ringfit.domain.schemas.input_data import ProcessingOptions, RecordRequest, RequestContext
from ringfit.domain.schemas.result_data import ResultData


class Pipeline_interface(ABC):
    @abstractmethod
    def run(
        self,
        request: RecordRequest,
        options: Optional[ProcessingOptions] = None,
        context: Optional[RequestContext] = None,
    ) -> ResultData:
        pass
